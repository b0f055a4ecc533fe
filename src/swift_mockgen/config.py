import os

from pydantic import BaseModel, ConfigDict

DEFAULT_ANNOTATION = "@CreateMock"

HEADER_DOC = """\
//  Copyright © Uber Technologies, Inc. All rights reserved.
//
//  @generated by SwiftMockGen
//  swiftlint:disable custom_rules
"""


class GeneratorSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    annotation: str = DEFAULT_ANNOTATION
    exclusions: tuple[str, ...] = ()
    attribute_filter: str | None = "available"
    pound_if: bool = True
    mock_suffix: str = "Mock"
    header: str = HEADER_DOC
    default_value_overrides: dict[str, str] = {}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def get_settings() -> GeneratorSettings:
    exclusions = os.getenv("SWIFT_MOCKGEN_EXCLUDE", "")
    attribute_filter = os.getenv("SWIFT_MOCKGEN_ATTRIBUTE", "available")
    return GeneratorSettings(
        annotation=os.getenv("SWIFT_MOCKGEN_ANNOTATION", DEFAULT_ANNOTATION),
        exclusions=tuple(e.strip() for e in exclusions.split(",") if e.strip()),
        attribute_filter=attribute_filter or None,
        pound_if=_env_flag("SWIFT_MOCKGEN_POUND_IF", True),
    )
