# Size filter values exposed by the store, in display order
SIZES = ("XS", "S", "M", "ML", "L", "XL", "XXL")


def validate_sizes(sizes):
    """Return sizes as a set, rejecting anything outside the store's size domain."""
    selected = set(sizes)
    unknown = selected.difference(SIZES)
    if unknown:
        raise ValueError(f"Unknown size(s) {sorted(unknown)}; expected a subset of {list(SIZES)}")
    return selected
