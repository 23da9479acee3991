# /app/services/keyword_service.py

import re
from typing import List, Optional

# Common English function words plus the words people use to *ask* for content
# ("write", "generate", "article", ...), which say nothing about the subject.
STOP_WORDS = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'from', 'as', 'is', 'was', 'are', 'were', 'been', 'be', 'have', 'has', 'had', 'do', 'does',
    'did', 'will', 'would', 'could', 'should', 'may', 'might', 'can', 'this', 'that', 'these',
    'those', 'i', 'you', 'he', 'she', 'it', 'we', 'they', 'what', 'which', 'who', 'when', 'where',
    'why', 'how', 'all', 'each', 'every', 'both', 'few', 'more', 'most', 'other', 'some', 'such',
    'no', 'nor', 'not', 'only', 'own', 'same', 'so', 'than', 'too', 'very', 'just', 'about',
    'write', 'create', 'make', 'generate', 'content', 'article', 'blog', 'post', 'essay', 'email',
    'script', 'ad', 'seo', 'social',
])

FALLBACK_KEYWORDS = ('professional', 'business', 'content')
MAX_KEYWORDS = 3
MIN_KEYWORD_LENGTH = 4

_NON_WORD = re.compile(r'[^\w\s]')


def extract_keywords(prompt: Optional[str], content_type: Optional[str] = None) -> List[str]:
    """
    Derives up to three image-search terms from a free-text prompt.

    Punctuation and stop-words are dropped, along with anything shorter than
    four characters. The survivors are de-duplicated (first occurrence wins)
    and ranked longest-first; ties keep their order in the prompt. The content
    type is accepted but never becomes a keyword.
    """
    cleaned = _NON_WORD.sub('', (prompt or '').lower())
    words = [w for w in cleaned.split() if len(w) >= MIN_KEYWORD_LENGTH and w not in STOP_WORDS]

    unique_words = list(dict.fromkeys(words))
    ranked = sorted(unique_words, key=len, reverse=True)

    keywords = ranked[:MAX_KEYWORDS]
    return keywords if keywords else list(FALLBACK_KEYWORDS)
