"""
Registration error taxonomy.

Every error raised while discovering or publishing capabilities derives from
RegistrationError so the refresh loop can catch them at the pass boundary.
"""


class RegistrationError(Exception):
    """Base class for capability registration failures."""

    stage = "registration"


class VersionResolutionFailed(RegistrationError):
    """The latest mesh version could not be determined."""

    stage = "version"


class FeedUnavailable(VersionResolutionFailed):
    """Release feed errored or returned no usable release."""


class BundleLocationFailed(RegistrationError):
    """The packaged bundle for a mesh version could not be located."""

    stage = "bundle"


class ChartVersionResolutionFailed(BundleLocationFailed):
    """No chart version matches the requested application version."""


class RegistrationRejected(RegistrationError):
    """The orchestration server refused or never received the submission."""

    stage = "submission"
