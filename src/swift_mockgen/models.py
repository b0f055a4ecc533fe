from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from swift_mockgen.source import SourceFile


class TypeShape(StrEnum):
    OPTIONAL = "optional"
    REACTIVE_STREAM = "reactive_stream"
    COLLECTION = "collection"
    PRIMITIVE = "primitive"
    UNKNOWN = "unknown"


class MemberKind(StrEnum):
    PROPERTY = "property"
    METHOD = "method"
    INITIALIZER = "initializer"


class DeclarationKind(StrEnum):
    PROTOCOL = "protocol"
    CLASS = "class"
    STRUCT = "struct"


class Attribute(BaseModel):
    """Raw attribute metadata as reported by the parser."""

    model_config = ConfigDict(frozen=True)

    kind: str | None = None
    offset: int | None = None
    length: int | None = None


class Parameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    name: str
    type: str


class MemberNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: MemberKind
    type_name: str = ""
    parameters: list[Parameter] = []
    generic_parameters: list[str] = []
    where_clause: str = ""
    is_static: bool = False
    is_override: bool = False
    is_async: bool = False
    throwing: str = ""
    is_failable: bool = False
    is_settable: bool = True


class Structure(BaseModel):
    """A parsed protocol, class or struct declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: DeclarationKind = DeclarationKind.PROTOCOL
    access_level: str = ""
    doc_offset: int | None = None
    doc_length: int | None = None
    attributes: list[Attribute] = []
    members: list[MemberNode] = []
    inherited_types: list[str] = []


class MemberModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    identifier: str
    kind: MemberKind
    raw_type: str
    type_shape: TypeShape
    wrapped_shape: TypeShape | None = None
    default_value: str | None = None
    is_static: bool = False
    is_override: bool = False
    is_initializer: bool = False
    parameters: list[Parameter] = []
    generic_parameters: list[str] = []
    where_clause: str = ""
    is_async: bool = False
    throwing: str = ""
    is_failable: bool = False

    @model_validator(mode="after")
    def _check_default_value(self) -> "MemberModel":
        if self.type_shape is not TypeShape.UNKNOWN and not self.default_value:
            raise ValueError(f"Member '{self.name}' of shape {self.type_shape} requires a default value")
        return self


class ProtocolMapEntry(BaseModel):
    """Unit of work handed to the renderer, one per eligible declaration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    structure: Structure
    file: SourceFile
    models: tuple[MemberModel, ...]
    attributes: tuple[str, ...]
