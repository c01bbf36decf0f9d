from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from werkzeug.datastructures import MultiDict


def payload_formdata(payload: Mapping[str, Any], aliases: Mapping[str, Iterable[str]]) -> MultiDict:
    """
    Flatten a JSON payload into WTForms formdata.

    `aliases` maps a form field name to the payload keys it may arrive under
    (camelCase from the website, snake_case from scripts). JSON scalars are
    stringified so BooleanField/DecimalField parse them the same way as form
    posts; None values, objects and arrays are dropped.
    """
    out: Dict[str, str] = {}
    for field, keys in aliases.items():
        for key in keys:
            if key not in payload or payload[key] is None:
                continue
            v = payload[key]
            if isinstance(v, (dict, list)):
                # structured values are never valid text; leave the field empty
                break
            if isinstance(v, bool):
                out[field] = "true" if v else "false"
            else:
                out[field] = str(v)
            break
    return MultiDict(out)


def first_errors(form: Any) -> Dict[str, str]:
    return {name: errs[0] for name, errs in form.errors.items() if errs}


def describe_errors(form: Any) -> str:
    return "; ".join(f"{name}: {msg}" for name, msg in first_errors(form).items())


__all__ = ["payload_formdata", "first_errors", "describe_errors"]
