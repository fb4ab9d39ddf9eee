"""
Text Aggregator

Collapses the per-word analyses of one text into a single TextResult.
"""

from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from .base import (
    CATEGORY_ORDER,
    NEUTRAL_LABEL,
    UNIFORM_WEIGHT,
    VAD,
    ProcessingMethod,
    Sentiment,
    SentimentPolarity,
    TextResult,
    WordAnalysis,
    dominant_category,
    mean,
    uniform_distribution,
)


logger = structlog.get_logger(__name__)


ContextHook = Callable[[List[WordAnalysis]], List[WordAnalysis]]

DEFAULT_SIGNIFICANCE_THRESHOLD = 0.25

# (minimum confidence, factor), checked in order
AMPLIFICATION_TIERS = (
    (0.5, 3.0),
    (0.3, 2.5),
)
BASE_AMPLIFICATION = 2.0


def amplification_for(confidence: float) -> float:
    """Factor applied to a word's dominant category."""
    for minimum, factor in AMPLIFICATION_TIERS:
        if confidence >= minimum:
            return factor
    return BASE_AMPLIFICATION


def neutral_result(analyses: Sequence[WordAnalysis] = ()) -> TextResult:
    """The fixed result for texts with no confident words."""
    return TextResult(
        overall_emotion=NEUTRAL_LABEL,
        confidence=UNIFORM_WEIGHT,
        emotions=uniform_distribution(),
        word_analysis=tuple(analyses),
        word_count=len(analyses),
        analyzed_words=0,
        coverage=0.0,
        vad=VAD(0.5, 0.5, 0.5),
        sentiment=Sentiment(SentimentPolarity.NEUTRAL, 0.5),
        processing_method=ProcessingMethod.NEUTRAL_FALLBACK,
    )


class TextAggregator:
    """
    Weighted aggregation of word profiles.

    Words count only when found and their confidence is strictly above the
    significance threshold. Each qualifying word adds its full distribution,
    with its dominant category multiplied by a confidence-tiered factor.
    """

    def __init__(
        self,
        significance_threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
        context_hook: Optional[ContextHook] = None,
    ):
        self.significance_threshold = significance_threshold
        self.context_hook = context_hook

    def qualifying(self, analyses: Sequence[WordAnalysis]) -> List[WordAnalysis]:
        return [
            a for a in analyses
            if a.found and a.confidence > self.significance_threshold
        ]

    def aggregate(self, analyses: Sequence[WordAnalysis]) -> TextResult:
        """Build the TextResult for one text."""
        analyses = list(analyses)
        if self.context_hook is not None:
            analyses = list(self.context_hook(analyses))

        significant = self.qualifying(analyses)
        if not significant:
            logger.debug("text_neutral_fallback", word_count=len(analyses))
            return neutral_result(analyses)

        totals: Dict[str, float] = {category: 0.0 for category in CATEGORY_ORDER}
        for analysis in significant:
            profile = analysis.profile
            dominant, confidence = dominant_category(profile.emotions)
            factor = amplification_for(confidence)
            for category in CATEGORY_ORDER:
                value = profile.emotions[category]
                totals[category] += value * factor if category == dominant else value

        total = sum(totals.values())
        if total > 0:
            emotions = {category: totals[category] / total for category in CATEGORY_ORDER}
        else:
            emotions = uniform_distribution()

        overall, confidence = dominant_category(emotions)

        vad = VAD(
            valence=mean(a.profile.vad.valence for a in significant),
            arousal=mean(a.profile.vad.arousal for a in significant),
            dominance=0.5,
        )

        word_count = len(analyses)
        return TextResult(
            overall_emotion=overall,
            confidence=confidence,
            emotions=emotions,
            word_analysis=tuple(analyses),
            word_count=word_count,
            analyzed_words=len(significant),
            coverage=len(significant) / word_count if word_count else 0.0,
            vad=vad,
            sentiment=self.vote_sentiment(significant),
            processing_method=ProcessingMethod.WEIGHTED,
        )

    @staticmethod
    def vote_sentiment(significant: Sequence[WordAnalysis]) -> Sentiment:
        """
        Majority vote over polarity labels; a tie for first is neutral.

        Strength is the mean strength of the words voting for the winner.
        """
        votes = Counter(a.profile.sentiment.polarity for a in significant)
        if not votes:
            return Sentiment(SentimentPolarity.NEUTRAL, 0.5)

        ranked = votes.most_common()
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return Sentiment(SentimentPolarity.NEUTRAL, 0.5)

        winner = ranked[0][0]
        if winner is SentimentPolarity.NEUTRAL:
            return Sentiment(SentimentPolarity.NEUTRAL, 0.5)

        strength = mean(
            a.profile.sentiment.strength
            for a in significant
            if a.profile.sentiment.polarity is winner
        )
        return Sentiment(winner, strength)


__all__ = [
    "ContextHook",
    "DEFAULT_SIGNIFICANCE_THRESHOLD",
    "AMPLIFICATION_TIERS",
    "BASE_AMPLIFICATION",
    "amplification_for",
    "neutral_result",
    "TextAggregator",
]
