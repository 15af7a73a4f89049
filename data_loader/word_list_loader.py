import logging
import os
from typing import List, Tuple

from sklearn.model_selection import train_test_split

logger = logging.getLogger(__name__)


class WordListLoader:
    def __init__(self, path: str, lowercase: bool = True):
        """
        Initialize the word list loader.
        One entry per line; blank lines and lines starting with '#' are skipped.
        """
        self.path = path
        self.lowercase = lowercase
        self.words: List[str] = []
        self.num_words = 0
        self.num_duplicates = 0

    def load_data(self) -> List[str]:
        """Read the file, normalize entries and drop repeats while keeping order."""
        if not os.path.isfile(self.path):
            raise FileNotFoundError(f"word list not found: {self.path}")
        seen = set()
        words = []
        duplicates = 0
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                word = line.strip()
                if not word or word.startswith("#"):
                    continue
                if self.lowercase:
                    word = word.lower()
                if word in seen:
                    duplicates += 1
                    continue
                seen.add(word)
                words.append(word)
        self.words = words
        self.num_words = len(words)
        self.num_duplicates = duplicates
        logger.info("Loaded %d words from %s (%d duplicates skipped)", self.num_words, self.path, duplicates)
        return words

    def split(self, holdout: float = 0.2, random_state: int = 42) -> Tuple[List[str], List[str]]:
        """
        Split the loaded words into (inserted, held_out) for false-positive checks
        against real vocabulary instead of random strings.
        """
        if not self.words:
            self.load_data()
        if not (0 < holdout < 1):
            raise ValueError("holdout must be in (0,1)")
        if len(self.words) < 2:
            return list(self.words), []
        inserted, held_out = train_test_split(self.words, test_size=holdout, random_state=random_state)
        return list(inserted), list(held_out)
