"""Variable reference counting."""

from typing import Iterable

from .models import UsageEntry, VariableDef
from .patterns import declaration_line_pattern, word_pattern


def find_variable_usages(content: str, variables: Iterable[VariableDef]) -> dict[str, UsageEntry]:
    """
    Count references to each variable, line by line.

    A line that declares the name with const/let/var is skipped entirely,
    including an unrelated shadowing declaration of the same name. Every
    other line adds its match count to total and its number once to lines.
    Names declared more than once are counted once.
    """
    usage_map: dict[str, UsageEntry] = {}
    lines = content.split("\n")

    names = dict.fromkeys(v.name for v in variables if v.name)
    for name in names:
        reference = word_pattern(name)
        declaration = declaration_line_pattern(name)
        for idx, line in enumerate(lines):
            if declaration.search(line):
                continue
            count = len(reference.findall(line))
            if count:
                entry = usage_map.setdefault(name, UsageEntry())
                entry.total += count
                entry.lines.append(idx + 1)

    return usage_map
