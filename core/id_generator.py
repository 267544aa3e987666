import random

# Two-digit entity codes
TYPE_POSTFIX = {
    "profile": 1,
    "profile_images": 3,
}


def generate_random_id(entity: str) -> int:
    """Returns an 8-digit id: 6 random digits + 2-digit entity postfix."""
    if entity not in TYPE_POSTFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    rand6 = random.randint(0, 999_999)
    postfix = TYPE_POSTFIX[entity]
    return rand6 * 100 + postfix
