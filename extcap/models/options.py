"""Configuration option descriptors shown in the front-end's interface options dialog.

Three option kinds are supported, each rendered as one ``arg`` line:

    arg {number=0}{call=--delay}{display=Time delay}{type=integer}{tooltip=Time delay between packages}{required=true}{range=1,15}
    arg {number=1}{call=--message}{display=Message}{type=string}{tooltip=Package message content}{placeholder=Please enter a message here ...}
    arg {number=2}{call=--verify}{display=Verify}{type=boolflag}{tooltip=Verify package content}

Descriptors are immutable. Build them directly or through the fluent builders::

    delay = (
        IntegerOptionBuilder("delay", "Time delay")
        .range(1, 15)
        .required(True)
        .tooltip("Time delay between packages")
        .build()
    )

``number`` stays 0 until the config listing assigns it with ``number_options``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from extcap.errors import OptionDefinitionError

# Flag identifier accepted as ``call``; the serializer adds the leading "--"
_CALL_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class OptionBase(BaseModel):
    """Fields shared by every option kind."""

    model_config = ConfigDict(frozen=True)

    number: int = 0  # assigned at listing time
    call: str
    display: str
    tooltip: str = ""
    group: str = ""
    required: bool = False

    @field_validator("number")
    @classmethod
    def _check_number(cls, value: int) -> int:
        if value != 0:
            raise OptionDefinitionError(
                f"Option number is assigned by the config listing, got {value}"
            )
        return value

    @field_validator("call")
    @classmethod
    def _check_call(cls, value: str) -> str:
        if not _CALL_PATTERN.match(value):
            raise OptionDefinitionError(f"Invalid option call name: {value!r}")
        return value

    def with_number(self, number: int) -> OptionBase:
        """Return a copy of this option carrying the given identity number.

        Skips validation, so this is the only way to set a non-zero number.
        """
        return self.model_copy(update={"number": number})

    def __str__(self) -> str:
        from extcap.serializer import render_option

        return render_option(self)


class IntegerOption(OptionBase):
    """Integer option, rendered with ``{type=integer}``."""

    kind: Literal["integer"] = "integer"
    range: tuple[int, int] | None = None  # (min, max)
    default: int | None = None

    @model_validator(mode="after")
    def _check_range(self) -> IntegerOption:
        if self.range is not None:
            _check_range_order(*self.range)
        return self


class StringOption(OptionBase):
    """Free-text option, rendered with ``{type=string}``."""

    kind: Literal["string"] = "string"
    placeholder: str = ""
    validation: str | None = None  # regular expression, kept verbatim
    default: str | None = None

    @field_validator("validation")
    @classmethod
    def _check_validation(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise OptionDefinitionError(f"Invalid validation pattern {value!r}: {exc}") from exc
        return value


class BooleanOption(OptionBase):
    """Presence flag option, rendered with ``{type=boolflag}``."""

    kind: Literal["boolflag"] = "boolflag"
    default: bool | None = None


ConfigOption = Annotated[
    Union[IntegerOption, StringOption, BooleanOption],
    Field(discriminator="kind"),
]

OPTION_TYPES = (IntegerOption, StringOption, BooleanOption)


def _check_range_order(min_value: int, max_value: int) -> None:
    if min_value >= max_value:
        raise OptionDefinitionError(
            f"In range max value should be greater than min value (got {min_value},{max_value})"
        )


def number_options(options: Iterable[OptionBase]) -> list[OptionBase]:
    """Assign identity numbers 0..n-1 in iteration order.

    Returns numbered copies; the input descriptors are left untouched.
    """
    return [opt.with_number(i) for i, opt in enumerate(options)]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class _OptionBuilder:
    """Accumulates option settings and produces an immutable descriptor."""

    def __init__(self, call: str, display: str) -> None:
        self._fields: dict[str, Any] = {"call": call, "display": display}

    def tooltip(self, tooltip: str):
        self._fields["tooltip"] = tooltip
        return self

    def group(self, group: str):
        self._fields["group"] = group
        return self

    def required(self, required: bool = True):
        self._fields["required"] = required
        return self


class IntegerOptionBuilder(_OptionBuilder):
    """Builder for ``IntegerOption``."""

    def range(self, min_value: int, max_value: int) -> IntegerOptionBuilder:
        """Set the accepted range. Raises ``OptionDefinitionError`` unless min < max."""
        _check_range_order(min_value, max_value)
        self._fields["range"] = (min_value, max_value)
        return self

    def default(self, value: int) -> IntegerOptionBuilder:
        self._fields["default"] = value
        return self

    def build(self) -> IntegerOption:
        return IntegerOption(**self._fields)


class StringOptionBuilder(_OptionBuilder):
    """Builder for ``StringOption``."""

    def placeholder(self, text: str) -> StringOptionBuilder:
        self._fields["placeholder"] = text
        return self

    def validation(self, pattern: str) -> StringOptionBuilder:
        self._fields["validation"] = pattern
        return self

    def default(self, value: str) -> StringOptionBuilder:
        self._fields["default"] = value
        return self

    def build(self) -> StringOption:
        return StringOption(**self._fields)


class BooleanOptionBuilder(_OptionBuilder):
    """Builder for ``BooleanOption``."""

    def default(self, value: bool) -> BooleanOptionBuilder:
        self._fields["default"] = value
        return self

    def build(self) -> BooleanOption:
        return BooleanOption(**self._fields)
