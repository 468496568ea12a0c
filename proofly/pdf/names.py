from dataclasses import dataclass


@dataclass(frozen=True)
class NameParts:
    first: str = ""
    middle: str = ""
    last: str = ""


def parse_full_name(full_name: str) -> NameParts:
    """Split "Last, First Middle" or "First Middle Last" into parts."""
    if not full_name or not full_name.strip():
        return NameParts()

    if "," in full_name:
        last, _, rest = (part.strip() for part in full_name.partition(","))
        rest_parts = rest.split()
        return NameParts(
            first=rest_parts[0] if rest_parts else "",
            middle=" ".join(rest_parts[1:]),
            last=last,
        )

    parts = full_name.split()
    if len(parts) == 1:
        return NameParts(first=parts[0])
    if len(parts) == 2:
        return NameParts(first=parts[0], last=parts[1])
    return NameParts(first=parts[0], middle=" ".join(parts[1:-1]), last=parts[-1])
