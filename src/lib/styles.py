"""
Style mini-formats

Three small line/attribute formats feed CSS into the rendered document:

- Global rules (``@style(mode=global)`` bodies), one rule per line:
      heading: font-size=24px, color="dark blue"
  becomes
      .heading { font-size:24px; color:dark blue; }

- Inline declarations (``@style(mode=inline, ...)`` attributes), rendered
  in a fixed order: font-size, color, then every other key alphabetically.

- Style aliases (``@style-def`` bodies), one ``alias: class list`` per line,
  later definitions overriding earlier ones.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from .log import LOG


STYLE_KEY_PRIORITY: Dict[str, int] = {
    'font-size': 0,
    'color': 1,
}

MODE_KEY = 'mode'


def quoted_strip(value: str) -> str:
    """Remove one pair of surrounding double or single quotes"""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        return value[1:-1]
    return value


def declarations_split(text: str) -> List[str]:
    """Split 'k=v, k2="a, b"' on commas that are not inside quotes"""
    parts: List[str] = []
    current: List[str] = []
    quote = ''
    for c in text:
        if quote:
            if c == quote:
                quote = ''
        elif c in '"\'':
            quote = c
        elif c == ',':
            parts.append(''.join(current))
            current = []
            continue
        current.append(c)
    parts.append(''.join(current))
    return [part.strip() for part in parts if part.strip()]


def declarations_parse(text: str) -> List[Tuple[str, str]]:
    """
    Parse the declaration half of a global rule line

    Args:
        text: 'key=value, key2="value2"'

    Returns:
        (key, value) pairs in source order; pairs without '=' are dropped
    """
    pairs: List[Tuple[str, str]] = []
    for part in declarations_split(text):
        key, sep, value = part.partition('=')
        if not sep or not key.strip():
            LOG(f"Ignoring style declaration '{part}'", level=2)
            continue
        pairs.append((key.strip(), quoted_strip(value)))
    return pairs


def selector_normalize(selector: str) -> str:
    """Prefix a bare selector name with '.'"""
    if selector.startswith(('.', '#')):
        return selector
    return f'.{selector}'


def globalRule_render(line: str) -> Optional[str]:
    """
    Render one global rule line as a CSS rule block

    Args:
        line: 'selector: key=value, key2=value2'

    Returns:
        '.selector { key:value; key2:value2; }' or None for blank or
        malformed lines
    """
    stripped = line.strip()
    if not stripped:
        return None
    selector, sep, body = stripped.partition(':')
    selector = selector.strip()
    if not sep or not selector:
        LOG(f"Ignoring global style line without selector: '{stripped}'", level=2)
        return None

    declarations = [f'{key}:{value};' for key, value in declarations_parse(body)]
    return ' '.join([f'{selector_normalize(selector)} {{'] + declarations + ['}'])


def globalRules_render(content: str) -> List[str]:
    """Render every rule line of a global Style body"""
    rules = []
    for line in content.splitlines():
        rule = globalRule_render(line)
        if rule is not None:
            rules.append(rule)
    return rules


def styleKey_order(key: str) -> Tuple[int, str]:
    """Sort key: font-size first, color second, then alphabetical"""
    return STYLE_KEY_PRIORITY.get(key, len(STYLE_KEY_PRIORITY)), key


def inlineStyle_render(attributes: Mapping[str, str]) -> str:
    """
    Build an inline style string from Style node attributes

    Args:
        attributes: Node attributes; the 'mode' key is excluded

    Returns:
        'k:v;k2:v2;' with keys in styleKey_order()

    Example:
        >>> inlineStyle_render({"mode": "inline", "color": "blue", "font-size": "18px"})
        'font-size:18px;color:blue;'
    """
    keys = sorted((key for key in attributes if key != MODE_KEY), key=styleKey_order)
    return ''.join(f'{key}:{attributes[key]};' for key in keys)


def styleAliases_parse(content: str, aliases: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Parse a StyleDef body into an alias table

    Args:
        content: Lines of 'alias: class list'
        aliases: Existing table to extend; a repeated alias is overwritten

    Returns:
        The alias table
    """
    table: Dict[str, str] = aliases if aliases is not None else {}
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        alias, sep, classes = stripped.partition(':')
        if not sep or not alias.strip():
            LOG(f"Ignoring style alias line '{stripped}'", level=2)
            continue
        table[alias.strip()] = ' '.join(classes.split())
    return table
