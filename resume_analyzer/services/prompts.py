import re

from resume_analyzer.models.analysis import AnalysisPrompt

# Bump whenever the expected reply shape changes; the parser reads SCORE_PATTERN below.
PROMPT_VERSION = "suitability-v1"

# First standalone `<1-3 digits>%` in the reply is the suitability score; longer digit runs never match.
SCORE_PATTERN = re.compile(r"(?<!\d)(\d{1,3})%")

ANALYSIS_PROMPT = """Analyze the suitability of the following resume:

{resume_text}

against this job description:

{job_description}

Provide a suitability score (0-100%) and key improvements in a clear, structured format using bullet points. \
State the score exactly once, as a whole number followed by a percent sign (for example "Score: 72%"), \
before any other section. Separate strengths, weaknesses, and suggestions into distinct sections."""

EMPTY_RESUME_MARKER = "[No text could be extracted from the resume]"


def build_prompt(resume_text: str, job_description: str) -> AnalysisPrompt:
    """Fill the analysis template.

    Single-pass formatting, so braces or placeholder-like tokens inside the
    resume or job text are left as they are.
    """
    text = ANALYSIS_PROMPT.format(
        resume_text=resume_text,
        job_description=job_description,
    )
    return AnalysisPrompt(text=text, version=PROMPT_VERSION)
