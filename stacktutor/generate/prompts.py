# Prompt templates for the StackTutor tutor tools.
# Every tool answers in markdown; rendering happens in the UI.

BASE_TUTOR_RULES = """\
You are StackTutor, a patient programming tutor.
Answer in clean markdown. Use fenced code blocks for code.
Keep explanations accurate and beginner friendly.
"""

TOOL_TEMPLATES = {
    "explain": (
        "Explain the following {language} code snippet. Break down what each part does "
        "in a clear, concise way for a beginner.\n\n```{language}\n{code}\n```"
    ),
    "simplify": (
        "Explain this topic in simpler terms, like I'm a complete beginner. "
        "Use an analogy if it helps.\n\nTopic: \"{topic}\""
    ),
    "review": (
        "As a senior software engineer, review the following {language} code solution for the "
        "exercise described. Provide feedback on correctness, efficiency, code style, and best "
        "practices. Suggest improvements or a refactored version if applicable.\n\n"
        "Exercise: \"{exercise}\"\n\nCode:\n```{language}\n{code}\n```"
    ),
    "debug": (
        "I have a bug in my {language} code. Please analyze it, identify the error, explain "
        "what's wrong, and provide the corrected code.\n\nBuggy Code:\n```{language}\n{code}\n```"
    ),
    "project-idea": (
        "Suggest a small, beginner-friendly project idea using {language} that incorporates the "
        "following topics: {topics}. Describe the project, its core features, and why it's a good "
        "way to practice these skills."
    ),
    "interview-eval": (
        "Act as a senior technical interviewer. Evaluate the candidate's submission for the "
        "following question. Provide constructive feedback on the code's correctness, efficiency, "
        "and clarity, as well as the quality of their explanation.\n\n"
        "Question: \"{question}\"\n\nCandidate's Code:\n```\n{code}\n```\n\n"
        "Candidate's Explanation:\n\"{explanation}\""
    ),
}


def build_tool_prompt(tool: str, **fields) -> str:
    if tool not in TOOL_TEMPLATES:
        raise KeyError(f"Unknown tutor tool '{tool}'")
    if isinstance(fields.get("topics"), (list, tuple)):
        fields["topics"] = ", ".join(fields["topics"])
    try:
        return TOOL_TEMPLATES[tool].format(**fields)
    except KeyError as e:
        raise ValueError(f"Tool '{tool}' is missing field {e.args[0]!r}") from e


# Structured tools answer with a single JSON object instead of markdown.
JSON_ONLY_RULE = "Respond with a single JSON object only, with no markdown and no commentary."

STRUCTURED_TEMPLATES = {
    "quiz": (
        "Create a 3-question multiple-choice quiz about the following topic. For each question, "
        "provide 4 options, indicate the correct answer, and give a brief explanation for why "
        "it's correct.\n\nTopic: {topic_title}\nContent: {topic_content}\n\n"
        'JSON shape: {{"questions": [{{"question": str, "options": [str, str, str, str], '
        '"correctAnswer": str, "explanation": str}}]}}'
    ),
    "learning-path": (
        "A user wants to achieve a learning goal. Your task is to create a personalized learning "
        "path using the available topics. The user's goal is: \"{goal}\".\n\n"
        "Available topics: {catalog}\n\n"
        "You must create a step-by-step path. For each step, you must specify the 'languageSlug', "
        "'languageName', 'topicSlug', 'topicTitle', and a brief 'reason' why this topic is the next "
        "logical step. The path should have a main 'title' and a 'description'.\n\n"
        'JSON shape: {{"title": str, "description": str, "steps": [{{"languageSlug": str, '
        '"languageName": str, "topicSlug": str, "topicTitle": str, "reason": str}}]}}'
    ),
    "interview-question": (
        "Generate a beginner-to-intermediate level technical interview question for a developer "
        "specializing in {technology}. The question should be a practical coding problem. Provide "
        "a clear 'question' title and 'instructions' on what needs to be implemented.\n\n"
        'JSON shape: {{"question": str, "instructions": str}}'
    ),
}


def build_structured_prompt(tool: str, **fields) -> str:
    if tool not in STRUCTURED_TEMPLATES:
        raise KeyError(f"Unknown structured tool '{tool}'")
    if isinstance(fields.get("catalog"), (list, tuple)):
        fields["catalog"] = ", ".join(fields["catalog"]) or "any topic you see fit"
    try:
        body = STRUCTURED_TEMPLATES[tool].format(**fields)
    except KeyError as e:
        raise ValueError(f"Tool '{tool}' is missing field {e.args[0]!r}") from e
    return f"{body}\n\n{JSON_ONLY_RULE}"
