from typing import List


def split_preprocessed_tokens(text: str) -> List[str]:
    """
    Split text into lowercase tokens.
    Assumes text is already space-separated; surrounding punctuation is stripped.
    """
    tokens = []
    for token in text.split():
        token = token.strip().strip(".,;:!?\"'()[]{}").lower()
        if token:
            tokens.append(token)
    return tokens
