import logging
import re

from resume_analyzer.models.analysis import UNKNOWN_SCORE, AnalysisResult, RawModelReply
from resume_analyzer.services.prompts import SCORE_PATTERN

logger = logging.getLogger("uvicorn.error")

# Greedy: everything up to and including the last "%" in the reply.
_THROUGH_LAST_PERCENT = re.compile(r".*%", re.DOTALL)


def parse_reply(reply: RawModelReply) -> AnalysisResult:
    """Split a free-form model reply into a score and a suggestions body.

    The score is the first ``<digits>%`` run whose value lies in 0..100. When
    any percentage is found, the suggestions are whatever follows the last
    ``%`` in the reply, stripped. With no percentage at all the score is
    ``"Unknown"`` and the reply is returned untouched as the suggestions.

    More than one percentage makes the trim ambiguous: text between the real
    score and a later stray ``%`` is dropped. Such results are flagged
    ``ambiguous`` and logged, not repaired.
    """
    text = reply.text
    matches = SCORE_PATTERN.findall(text)
    if not matches:
        return AnalysisResult(score=UNKNOWN_SCORE, suggestions=text)

    score = next((int(m) for m in matches if int(m) <= 100), UNKNOWN_SCORE)
    suggestions = _THROUGH_LAST_PERCENT.sub("", text, count=1).strip()

    ambiguous = text.count("%") > 1
    if ambiguous:
        logger.warning(
            f"Reply contains {text.count('%')} percent signs; using {score} as the score "
            "and trimming through the last one"
        )
    return AnalysisResult(score=score, suggestions=suggestions, ambiguous=ambiguous)
