SYSTEM_PROMPT = """
You are assisting a hiring manager by scoring a job candidate.
Return ONLY valid JSON that matches the required shape.
No markdown. No extra keys. No commentary.
""".strip()


SCORING_RUBRIC = """
Rubric (integer scores 1-5):
- relevance: fit/alignment of the candidate's background to the role and team.
- experience: evidence of scope, ownership and measurable impact.
- motivation: specificity and clarity of interest in this role.
- risk: concerns about the candidate (1 = low risk, 5 = high risk).

Scoring bands:
- 5: strong, explicit evidence in the CV or answers
- 4: clear evidence with minor gaps
- 3: mixed or partial evidence (neutral)
- 2: weak evidence
- 1: no evidence (for risk: no concerns)

Every reason must be one or two sentences citing what you saw.
Do NOT infer facts that are not in the CV or the answers.
""".strip()


OUTPUT_CONTRACT = """
Return a JSON object with exactly this shape:
{
  "relevance": {"score": <1-5>, "reason": "<text>"},
  "experience": {"score": <1-5>, "reason": "<text>"},
  "motivation": {"score": <1-5>, "reason": "<text>"},
  "risk": {"score": <1-5>, "reason": "<text>"},
  "riskFlags": ["<short_snake_case_label>", ...]
}

riskFlags: up to 20 short labels naming specific concerns (e.g. "job_hopping"),
or an empty array when there are none.
""".strip()


CANDIDATE_PROMPT = """
Candidate: {candidate_name} (id={candidate_id})
JobId: {job_id}
CV URL: {cv_url}

CV text:
---
{cv_text}
---

Application answers (verbatim):
---
{answers_text}
---
""".strip()
