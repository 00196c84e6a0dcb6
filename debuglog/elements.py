"""
Summaries of host UI elements.

An element is anything carrying a tag name: xml.etree.ElementTree elements, or
DOM-like objects exposing `tag_name` / `tagName` together with `attributes`
and `children`.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import xml.etree.ElementTree as ET
from enum import StrEnum, unique
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import safe_str

# Constants ------------------------------------------------------------------------------------------------------------

DOM_PLACEHOLDER = "[DOM Element]"

_TAG_ATTRS = ("tag_name", "tagName")


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class DomElementFormat(StrEnum):
    """
    How elements are rendered:
        - "inspect": tag name, full attribute list and child count
        - "summary": tag name, attribute count and child count
        - "disabled": generic placeholder only
    """
    INSPECT = "inspect"
    SUMMARY = "summary"
    DISABLED = "disabled"


# Methods --------------------------------------------------------------------------------------------------------------

def is_element(obj: Any) -> bool:
    """Check whether obj looks like a host UI element (has a tag-name-like field)."""
    if isinstance(obj, ET.Element):
        return True
    for attr in _TAG_ATTRS:
        try:
            if isinstance(getattr(obj, attr, None), str):
                return True
        except Exception:
            return False
    return False


def format_element(element: Any, mode: DomElementFormat | str = DomElementFormat.SUMMARY) -> str:
    """
    Render an element according to mode.

    Args:
        element: An ElementTree element or a DOM-like object.
        mode: One of DomElementFormat values.

    Returns:
        str: The element summary. Falls back to "[DOM Element]" if the element
            cannot be introspected.

    Examples:
        >>> el = ET.Element("DIV", {"id": "main", "class": "box"})
        >>> format_element(el, "summary")
        '<div> with 2 attributes and 0 children'
        >>> format_element(el, "inspect")
        '<div id="main" class="box">'
        >>> format_element(el, "disabled")
        '[DOM Element]'
    """
    mode = DomElementFormat(mode)
    if mode is DomElementFormat.DISABLED:
        return DOM_PLACEHOLDER

    try:
        tag = _tag_name(element)
        attributes = _attributes(element)
        children = _child_count(element)
    except Exception:
        return DOM_PLACEHOLDER

    if mode is DomElementFormat.INSPECT:
        attrs = "".join(f' {name}="{value}"' for name, value in attributes)
        suffix = f" ({children} children)" if children > 0 else ""
        return f"<{tag}{attrs}>{suffix}"

    return f"<{tag}> with {len(attributes)} attributes and {children} children"


# Private Methods ------------------------------------------------------------------------------------------------------

def _tag_name(element: Any) -> str:
    if isinstance(element, ET.Element):
        return safe_str(element.tag).lower()
    for attr in _TAG_ATTRS:
        tag = getattr(element, attr, None)
        if isinstance(tag, str):
            return tag.lower()
    raise TypeError("element has no tag name")


def _attributes(element: Any) -> list[tuple[str, str]]:
    """Return (name, value) pairs in document order."""
    if isinstance(element, ET.Element):
        raw = element.attrib
    else:
        raw = getattr(element, "attributes", None)

    if raw is None:
        return []
    if isinstance(raw, abc.Mapping):
        return [(safe_str(k), safe_str(v)) for k, v in raw.items()]

    pairs = []
    for attr in raw:
        if isinstance(attr, tuple) and len(attr) == 2:
            name, value = attr
        else:
            # DOM Attr-like node
            name, value = attr.name, attr.value
        pairs.append((safe_str(name), safe_str(value)))
    return pairs


def _child_count(element: Any) -> int:
    if isinstance(element, ET.Element):
        return len(element)
    children = getattr(element, "children", None)
    if children is None:
        return 0
    return len(children)
