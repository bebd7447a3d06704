# ===============================================
# tests/test_generator.py
# Tutor tools on top of ChatGenerator.
# ===============================================

import pytest

from stacktutor.generate import ChatGenerator, EchoDevClient, InterviewQuestion, LearningPath, Quiz, StructuredOutputError
from stacktutor.generate.prompts import build_structured_prompt, build_tool_prompt
from tests.fakes import ScriptedClient


def test_explain_code_with_echo_client():
    out = ChatGenerator(model_client=EchoDevClient()).explain_code("print(1)", "python")
    assert out.tool == "explain"
    assert out.text.startswith("[ECHO RESPONSE]")
    assert "```python\nprint(1)\n```" in out.text


def test_messages_and_config_defaults():
    client = ScriptedClient(["ok"])
    gen = ChatGenerator(model_client=client)

    gen.review_code("x = 1", "python", "assign one")
    messages, params = client.calls[-1]
    assert [m.role for m in messages] == ["system", "user"]
    assert "StackTutor" in messages[0].content
    assert 'Exercise: "assign one"' in messages[1].content
    assert params.temperature == 0.2  # per-tool override in config.yaml
    assert params.max_tokens == 1000

    gen.debug_code("x =", "python")
    assert client.calls[-1][1].temperature == 0.3


def test_request_values_win_over_config():
    client = ScriptedClient(["ok"])
    ChatGenerator(model_client=client).run_tool("project-idea", temperature=0.9, max_tokens=42, language="go", topics=["maps"])
    params = client.calls[-1][1]
    assert (params.temperature, params.max_tokens) == (0.9, 42)


def test_missing_config_file_falls_back(tmp_path):
    client = ScriptedClient(["ok"])
    gen = ChatGenerator(model_client=client, config_path=str(tmp_path / "nope.yaml"))
    gen.simplify_topic("closures")
    assert gen.cfg == {}
    assert client.calls[-1][1].temperature == 0.3


def test_all_tools_listed():
    gen = ChatGenerator(model_client=EchoDevClient())
    assert gen.tools == ["debug", "explain", "interview-eval", "project-idea", "review", "simplify"]


def test_tool_prompts():
    assert "topics: loops, functions." in build_tool_prompt("project-idea", language="js", topics=["loops", "functions"])
    text = build_tool_prompt("interview-eval", question="FizzBuzz", code="...", explanation="mod 3")
    assert 'Question: "FizzBuzz"' in text
    assert '"mod 3"' in text


def test_tool_prompt_errors():
    with pytest.raises(KeyError):
        build_tool_prompt("nope")
    with pytest.raises(ValueError, match="code"):
        build_tool_prompt("debug", language="python")


# -------------------------
# Structured (JSON) tools
# -------------------------
QUIZ_JSON = (
    '{"questions": [{"question": "What does len([1, 2]) return?", "options": ["1", "2", "3", "error"],'
    ' "correctAnswer": "2", "explanation": "The list has two items."}]}'
)


def test_generate_quiz_parses_json():
    client = ScriptedClient([QUIZ_JSON])
    quiz = ChatGenerator(model_client=client).generate_quiz("Lists", "Python lists hold items.")

    assert isinstance(quiz, Quiz)
    assert quiz.questions[0].correct_answer == "2"
    assert quiz.questions[0].options == ["1", "2", "3", "error"]
    messages, params = client.calls[-1]
    assert "markdown" not in messages[0].content
    assert "single JSON object" in messages[0].content
    assert "Topic: Lists" in messages[1].content
    assert params.max_tokens == 1500


def test_quiz_inside_json_fence_is_accepted():
    fenced = "Here you go:\n```json\n" + QUIZ_JSON + "\n```"
    quiz = ChatGenerator(model_client=ScriptedClient([fenced])).generate_quiz("Lists", "")
    assert len(quiz.questions) == 1


@pytest.mark.parametrize("reply", ["", "   ", "not json", '{"questions": []}', '{"questions": [{"question": "q"}]}'])
def test_invalid_quiz_raises(reply):
    gen = ChatGenerator(model_client=ScriptedClient([reply]))
    with pytest.raises(StructuredOutputError, match="AI failed to generate a valid quiz.") as exc:
        gen.generate_quiz("Lists", "")
    assert exc.value.tool == "quiz"


def test_learning_path_accepts_snake_or_camel_keys():
    reply = (
        '{"title": "Backend in Go", "description": "From basics to HTTP.", "steps": ['
        '{"languageSlug": "go", "languageName": "Go", "topicSlug": "structs", "topicTitle": "Structs", "reason": "Data first."},'
        '{"language_slug": "go", "language_name": "Go", "topic_slug": "net-http", "topic_title": "net/http", "reason": "Then serve it."}]}'
    )
    client = ScriptedClient([reply])
    path = ChatGenerator(model_client=client).generate_learning_path("build APIs", ["go/structs", "go/net-http"])

    assert isinstance(path, LearningPath)
    assert [s.topic_slug for s in path.steps] == ["structs", "net-http"]
    assert path.model_dump()["steps"][0]["language_name"] == "Go"
    assert "Available topics: go/structs, go/net-http" in client.calls[-1][0][1].content


def test_learning_path_without_steps_raises():
    gen = ChatGenerator(model_client=ScriptedClient(['{"title": "t", "description": "d", "steps": []}']))
    with pytest.raises(StructuredOutputError, match="learning path"):
        gen.generate_learning_path("anything")


def test_interview_question():
    reply = '{"question": "Reverse a string", "instructions": "Write reverse(s) without slicing."}'
    client = ScriptedClient([reply])
    q = ChatGenerator(model_client=client).get_interview_question("Python")

    assert isinstance(q, InterviewQuestion)
    assert q.question == "Reverse a string"
    assert "specializing in Python" in client.calls[-1][0][1].content


def test_interview_question_missing_instructions_raises():
    gen = ChatGenerator(model_client=ScriptedClient(['{"question": "Reverse a string"}']))
    with pytest.raises(StructuredOutputError):
        gen.get_interview_question("Python")


def test_structured_tools_listed_and_prompt_errors():
    assert ChatGenerator(model_client=EchoDevClient()).structured_tools == ["interview-question", "learning-path", "quiz"]
    with pytest.raises(KeyError):
        build_structured_prompt("nope")
    with pytest.raises(ValueError, match="technology"):
        build_structured_prompt("interview-question")
