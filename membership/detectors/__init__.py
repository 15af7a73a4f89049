from .word_list_detector import WordListDetector

__all__ = ["WordListDetector"]
