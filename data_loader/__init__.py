from .word_list_loader import WordListLoader

__all__ = ['WordListLoader']
