def normalize_name(s: str) -> str:
    """Case-insensitive form of a reference name, hyphens kept."""
    if not isinstance(s, str):
        s = str(s or '')
    return s.strip().casefold()


def same_name(a: str, b: str) -> bool:
    return normalize_name(a) == normalize_name(b)


def display_name(species_name: str) -> str:
    # "mr-mime" -> "Mr-mime": first letter only, the battle engine keys on this
    if not species_name:
        return ''
    return species_name[0].upper() + species_name[1:]
