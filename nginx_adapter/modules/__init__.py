"""
Adapter modules.

Each module is a black box with a small public interface exported from its
package __init__.
"""
