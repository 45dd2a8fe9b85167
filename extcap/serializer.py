"""Line renderer for the extcap attribute-list grammar.

Every entity becomes one line of the form ``<kind> {key=value}{key=value}...``:

  extcap {version=1.0}{help=https://www.wireshark.org}
  interface {value=example1}{display=Example interface 1 for extcap}
  dlt {number=147}{name=USER1}{display=Demo Implementation for Extcap}
  arg {number=0}{call=--delay}{display=Time delay}{type=integer}{range=1,15}

Values are inserted verbatim. Front-ends parse the unescaped form, so a ``}``
inside a display string or validation pattern corrupts the line; this is left
as-is.
"""

from __future__ import annotations

from extcap.models.interface import DLT, CaptureInterface, VersionInfo
from extcap.models.options import BooleanOption, IntegerOption, OptionBase, StringOption


def _attrs(pairs: list[tuple[str, object]]) -> str:
    return "".join(f"{{{key}={value}}}" for key, value in pairs)


def render_version(version: VersionInfo) -> str:
    """Render the ``extcap`` version preamble."""
    return "extcap " + _attrs([("version", version.info), ("help", version.help)])


def render_interface(iface: CaptureInterface) -> str:
    """Render one ``interface`` line."""
    return "interface " + _attrs([("value", iface.value), ("display", iface.display)])


def render_dlt(dlt: DLT) -> str:
    """Render one ``dlt`` line."""
    return "dlt " + _attrs([("number", dlt.number), ("name", dlt.name), ("display", dlt.display)])


def _integer_params(opt: IntegerOption) -> list[tuple[str, object]]:
    params: list[tuple[str, object]] = []
    if opt.range is not None:
        params.append(("range", f"{opt.range[0]},{opt.range[1]}"))
    if opt.default is not None:
        params.append(("default", opt.default))
    return params


def _string_params(opt: StringOption) -> list[tuple[str, object]]:
    params: list[tuple[str, object]] = []
    if opt.placeholder:
        params.append(("placeholder", opt.placeholder))
    if opt.validation is not None:
        params.append(("validation", opt.validation))
    return params


def _boolean_params(opt: BooleanOption) -> list[tuple[str, object]]:
    if opt.default is None:
        return []
    return [("default", "true" if opt.default else "false")]


# option class → (wire type name, type-specific attribute builder)
_OPTION_KINDS = {
    IntegerOption: ("integer", _integer_params),
    StringOption: ("string", _string_params),
    BooleanOption: ("boolflag", _boolean_params),
}


def render_option(opt: OptionBase) -> str:
    """Render one ``arg`` line for a configuration option.

    Common attributes come first (number, call, display, type), then the
    optional tooltip, required and group, then the type-specific ones.

    Raises:
        TypeError: If ``opt`` is not one of the supported option kinds.
    """
    try:
        type_name, params_for = _OPTION_KINDS[type(opt)]
    except KeyError:
        raise TypeError(f"Unknown config option type: {type(opt).__name__}") from None

    pairs: list[tuple[str, object]] = [
        ("number", opt.number),
        ("call", f"--{opt.call}"),
        ("display", opt.display),
        ("type", type_name),
    ]
    if opt.tooltip:
        pairs.append(("tooltip", opt.tooltip))
    if opt.required:
        pairs.append(("required", "true"))
    if opt.group:
        pairs.append(("group", opt.group))
    pairs.extend(params_for(opt))

    return "arg " + _attrs(pairs)


def render(entity: VersionInfo | CaptureInterface | DLT | OptionBase) -> str:
    """Render any protocol entity to its line."""
    if isinstance(entity, VersionInfo):
        return render_version(entity)
    if isinstance(entity, CaptureInterface):
        return render_interface(entity)
    if isinstance(entity, DLT):
        return render_dlt(entity)
    return render_option(entity)
