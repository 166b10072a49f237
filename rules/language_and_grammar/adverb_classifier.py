"""
Adverb Classifier
Decides which adverbs in a parsed sentence are stylistically dubious.

An adverb is flagged when it modifies a verb, is rare in the reference corpus, and
its head verb sits close to a prototype of evocative speech verbs ("pleaded",
"confided", "bragged", ...). Each step of the decision is an explicit guard so the
evidence behind every outcome is recorded the same way.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from lexicon import LexiconStore, PrototypeVector, DegenerateVectorError, cosine_similarity, is_rare

ADVERB = 'ADV'
VERB = 'VERB'


@dataclass(eq=False)
class Token:
    """Pipeline token as seen by the classifier."""
    text: str
    pos: str
    head: Optional['Token'] = field(default=None, repr=False)
    log_prob: Optional[float] = None
    vector: Optional[np.ndarray] = field(default=None, repr=False)
    index: Optional[int] = None


class DecisionReason(Enum):
    NOT_ADVERB = 'not_adverb'
    NO_VERBAL_HEAD = 'no_verbal_head'
    COMMON_ADVERB = 'common_adverb'
    HEAD_WITHOUT_VECTOR = 'head_without_vector'
    DEGENERATE_HEAD_VECTOR = 'degenerate_head_vector'
    INCOMPATIBLE_HEAD_VECTOR = 'incompatible_head_vector'
    BELOW_TOLERANCE = 'below_tolerance'
    FLAGGED = 'flagged'


@dataclass(frozen=True)
class FlagDecision:
    """Outcome for one token, with the evidence gathered before the decision."""
    index: int
    text: str
    flagged: bool
    reason: DecisionReason
    head_text: Optional[str] = None
    is_rare: Optional[bool] = None
    score: Optional[float] = None


def _head_of(token: Token) -> Optional[Token]:
    head = token.head
    if head is None or head is token:
        return None
    return head


# === GUARDS ===
# Each guard returns a rejection reason or None to pass the token on.
# Guards may add evidence to the shared dict.

def _guard_adverb(token: Token, evidence: Dict, threshold: float) -> Optional[DecisionReason]:
    if token.pos != ADVERB:
        return DecisionReason.NOT_ADVERB
    return None


def _guard_verbal_head(token: Token, evidence: Dict, threshold: float) -> Optional[DecisionReason]:
    head = _head_of(token)
    if head is not None:
        evidence['head_text'] = head.text
    if head is None or head.pos != VERB:
        return DecisionReason.NO_VERBAL_HEAD
    return None


def _guard_rarity(token: Token, evidence: Dict, threshold: float) -> Optional[DecisionReason]:
    rare = is_rare(token.log_prob, threshold)
    evidence['is_rare'] = rare
    if not rare:
        return DecisionReason.COMMON_ADVERB
    return None


GUARDS: Sequence[Callable[[Token, Dict, float], Optional[DecisionReason]]] = (
    _guard_adverb,
    _guard_verbal_head,
    _guard_rarity,
)


def _decide(token: Token, position: int, threshold: float, prototype: np.ndarray,
            similarity_tolerance: float) -> FlagDecision:
    evidence: Dict = {}
    index = token.index if token.index is not None else position

    for guard in GUARDS:
        reason = guard(token, evidence, threshold)
        if reason is not None:
            return FlagDecision(index=index, text=token.text, flagged=False, reason=reason, **evidence)

    head_vector = _head_of(token).vector
    if head_vector is None:
        return FlagDecision(index=index, text=token.text, flagged=False,
                            reason=DecisionReason.HEAD_WITHOUT_VECTOR, score=-math.inf, **evidence)
    if np.shape(head_vector) != prototype.shape:
        return FlagDecision(index=index, text=token.text, flagged=False,
                            reason=DecisionReason.INCOMPATIBLE_HEAD_VECTOR, score=-math.inf, **evidence)
    try:
        score = cosine_similarity(head_vector, prototype)
    except DegenerateVectorError:
        return FlagDecision(index=index, text=token.text, flagged=False,
                            reason=DecisionReason.DEGENERATE_HEAD_VECTOR, score=-math.inf, **evidence)

    flagged = score >= similarity_tolerance
    reason = DecisionReason.FLAGGED if flagged else DecisionReason.BELOW_TOLERANCE
    return FlagDecision(index=index, text=token.text, flagged=flagged, reason=reason, score=score, **evidence)


def classify(tokens: Sequence[Token], threshold: float,
             prototype: Union[PrototypeVector, np.ndarray, Sequence[float]],
             similarity_tolerance: float) -> List[FlagDecision]:
    """
    Classify every token of a sentence.

    Args:
        tokens: Tokens in sentence order
        threshold: Rarity threshold from ``rarity_threshold``
        prototype: Prototype of the verb class the head verb is compared with
        similarity_tolerance: Minimum cosine similarity for a flag

    Returns:
        One ``FlagDecision`` per token, in input order
    """
    if isinstance(prototype, PrototypeVector):
        prototype = prototype.vector
    prototype = np.asarray(prototype, dtype=np.float64)
    return [
        _decide(token, position, threshold, prototype, similarity_tolerance)
        for position, token in enumerate(tokens)
    ]


def flagged(decisions: Iterable[FlagDecision]) -> List[FlagDecision]:
    """The subsequence of decisions that flag their token."""
    return [decision for decision in decisions if decision.flagged]


# === spaCy ADAPTER ===

def tokens_from_span(span, store: Optional[LexiconStore] = None) -> List[Token]:
    """
    Convert a spaCy ``Span`` (or ``Doc``) into classifier tokens.

    Log-probabilities and vectors come from the lexicon store; a word the store does
    not know gets ``log_prob=None``. When the store has no vector for a word, the
    spaCy token vector is used if the pipeline provides one of the store's dimension.
    """
    spacy_tokens = list(span)
    tokens: List[Token] = []
    for spacy_token in spacy_tokens:
        entry = store.get(spacy_token.text) if store is not None else None
        if entry is None and store is not None:
            entry = store.get(spacy_token.text.lower())

        vector = entry.vector if entry is not None else None
        if vector is None and getattr(spacy_token, 'has_vector', False):
            if store is None or store.dimension is None or spacy_token.vector.shape[0] == store.dimension:
                vector = spacy_token.vector

        tokens.append(Token(
            text=spacy_token.text,
            pos=spacy_token.pos_,
            log_prob=entry.log_prob if entry is not None else None,
            vector=vector,
            index=spacy_token.i,
        ))

    by_doc_index = {token.index: token for token in tokens}
    for token, spacy_token in zip(tokens, spacy_tokens):
        token.head = by_doc_index.get(spacy_token.head.i)
    return tokens
