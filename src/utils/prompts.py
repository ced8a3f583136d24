"""
Prompts for grading uploaded student work.
"""

from typing import Dict, List


GRADING_SYSTEM_PROMPT = """You are an expert, impartial teacher. Your role is to evaluate student work in a constructive and detailed way.
IMPORTANT: You must ALWAYS answer in JSON with exactly this structure:
{{
  "summary": "short summary of the evaluation in 2-3 sentences",
  "strengths": ["strength 1", "strength 2", ...],
  "improvements": ["point to improve 1", "point to improve 2", ...],
  "grade": "grade out of 20 (e.g. 14/20)",
  "detailedAnalysis": "detailed and constructive analysis",
  "detailed_corrections": [
    {{"original": "quoted passage", "correction": "corrected passage", "explanation": "why"}}
  ]
}}
"detailed_corrections" is optional; include it only when specific passages need correcting.
Grading rules:
- Adapt your evaluation to the subject: {subject}
- If the work is excellent, give a high grade (16-20)
- If the work is good but contains mistakes, give an average grade (12-15)
- If the work has major problems, give a lower grade (8-11)
- Only for incomplete or very poor work, give a low grade (<8)"""


GRADING_USER_PROMPT = """Evaluate the following work:
ASSIGNMENT TITLE: {assignment_title}
SUBJECT: {subject}
ASSIGNMENT INSTRUCTIONS:
{instructions}
GRADING CRITERIA:
{criteria}
STUDENT WORK:
{student_work}
Evaluate this work against the instructions and criteria provided. Answer ONLY in JSON with the requested structure."""


def build_grading_conversation(
    assignment_title: str,
    subject: str,
    instructions: str,
    criteria: str,
    student_work: str,
) -> List[Dict[str, str]]:
    """System persona with the reply schema, then the user turn with all inputs verbatim."""
    return [
        {"role": "system", "content": GRADING_SYSTEM_PROMPT.format(subject=subject)},
        {
            "role": "user",
            "content": GRADING_USER_PROMPT.format(
                assignment_title=assignment_title,
                subject=subject,
                instructions=instructions,
                criteria=criteria,
                student_work=student_work,
            ),
        },
    ]
