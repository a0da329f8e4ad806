"""
Extraction rule models for dynamic capability registration.

An ExtractionRule tells the orchestration server where to download a bundle
and how to walk its manifests to find workload definitions. The FilterSpec is
opaque query configuration: this adapter never evaluates the expressions, it
only guarantees they are all present before the rule is handed off.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

OUTPUT_FILTER_FLAG = " --o-filter"


class GenerationMethod(str, Enum):
    """How the server should generate components from the source."""

    HELM_CHARTS = "HELM_CHARTS"
    MANIFESTS = "MANIFESTS"


class Selector(BaseModel):
    """A query expression with an optional post-selection output filter."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., min_length=1)
    output_filter: Optional[str] = Field(default=None, min_length=1)

    def to_wire(self) -> List[str]:
        """Encode as the list form the server expects."""
        if self.output_filter is None:
            return [self.expression]
        return [self.expression, OUTPUT_FILTER_FLAG, self.output_filter]


class FilterSpec(BaseModel):
    """
    Declarative description of how to extract definitions from a bundle.

    All fields are required. Constructing a FilterSpec with any selector
    missing raises a pydantic ValidationError.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    root: Selector = Field(..., alias="rootFilter")
    name: Selector = Field(..., alias="nameFilter")
    version: Selector = Field(..., alias="versionFilter")
    group: Selector = Field(..., alias="groupFilter")
    spec: Selector = Field(..., alias="specFilter")
    iteration: Selector = Field(..., alias="itrFilter")
    iteration_spec: Selector = Field(..., alias="itrSpecFilter")
    version_field: str = Field(..., alias="vField", min_length=1)
    group_field: str = Field(..., alias="gField", min_length=1)

    @field_serializer(
        "root", "name", "version", "group", "spec", "iteration", "iteration_spec"
    )
    def _serialize_selector(self, selector: Selector) -> List[str]:
        return selector.to_wire()


NGINX_CRD_FILTER = FilterSpec(
    root=Selector(expression='$[?(@.kind=="CustomResourceDefinition")]'),
    name=Selector(expression='$..["spec"]["names"]["kind"]'),
    version=Selector(expression="$..spec.versions[0]", output_filter="$[0]"),
    group=Selector(expression="$..spec", output_filter="$[]"),
    spec=Selector(
        expression="$..openAPIV3Schema.properties.spec", output_filter="$[]"
    ),
    iteration=Selector(expression="$[?(@.spec.names.kind"),
    iteration_spec=Selector(expression="$[?(@.spec.names.kind"),
    version_field="name",
    group_field="group",
)


class ExtractionRule(BaseModel):
    """A complete dynamic registration request for one mesh version."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    mesh_version: str = Field(..., alias="meshVersion", min_length=1)
    filter: FilterSpec
    generation_method: GenerationMethod = Field(
        default=GenerationMethod.HELM_CHARTS, alias="generationMethod"
    )
    source_url: str = Field(..., alias="url", min_length=1)
    timeout_minutes: int = Field(default=60, alias="timeoutInMinutes", ge=1)
    operation: str = Field(default="nginx_operation")

    def to_request(self) -> Dict[str, Any]:
        """
        Build the structured request body for the registration sink.

        Mesh identity and the filter are grouped under "config", matching the
        shape the server uses for dynamic component generation.
        """
        return {
            "timeoutInMinutes": self.timeout_minutes,
            "url": self.source_url,
            "generationMethod": self.generation_method.value,
            "config": {
                "name": self.name,
                "meshVersion": self.mesh_version,
                "filter": self.filter.model_dump(by_alias=True),
            },
            "operation": self.operation,
        }
