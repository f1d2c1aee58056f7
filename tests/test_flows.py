import asyncio
import base64
import io
import wave

import pytest

from studywise.core.errors import (
    ModelInvocationError,
    NoMediaReturned,
    OutputSchemaViolation,
    SchemaViolation,
    UnknownFlow,
)
from studywise.modules.flows.adapter import MediaPayload
from studywise.modules.flows.main import StudyAssistant
from studywise.modules.flows.registry import FLOWS
from studywise.modules.flows.schemas import StudyScheduleInput, StudyScheduleOutput

from conftest import PCM, StubAdapter, notes_json


MISSING_REQUIRED = {
    "study_schedule": {"subjects": ["Math"], "dailyFreeTime": 4},
    "explain_concept": {},
    "analyze_weaknesses": {"quizResults": [], "mistakePatterns": "x"},
    "process_notes": {"context": "History"},
    "generate_motivation": {"subjects": ["Math"]},
    "text_to_speech": {"voice": "Cygnus"},
}


@pytest.mark.parametrize("name", sorted(MISSING_REQUIRED))
async def test_invalid_input_never_reaches_the_model(name):
    adapter = StubAdapter()
    assistant = StudyAssistant(adapter)
    with pytest.raises(SchemaViolation):
        await assistant.run(name, MISSING_REQUIRED[name])
    assert adapter.calls == []


def test_every_flow_has_a_missing_field_case():
    assert set(MISSING_REQUIRED) == set(FLOWS)


async def test_schedule_end_to_end(assistant, stub_adapter):
    result = await assistant.generate_study_schedule(
        {"subjects": ["Math", "Physics"], "examDate": "2024-12-25", "dailyFreeTime": 4}
    )
    assert isinstance(result, StudyScheduleOutput)
    assert len(result.study_schedule) == 2
    assert all(day.activities for day in result.study_schedule)

    (call,) = stub_adapter.calls
    assert call["flow"] == "study_schedule"
    assert "Subjects: Math, Physics" in call["prompt"]
    assert "studySchedule" in call["schema"]["properties"]


async def test_accepts_model_instance(assistant):
    data = StudyScheduleInput(subjects=["Math"], exam_date="2024-12-25", daily_free_time=2.5)
    result = await assistant.generate_study_schedule(data)
    assert result.revision_plan == ["Revise derivatives on Dec 24"]


async def test_each_text_flow_returns_its_output_model(assistant):
    concept = await assistant.explain_concept({"concept": "Entropy"})
    assert concept.practice_question.startswith("Why")

    weak = await assistant.analyze_weaknesses(
        {
            "quizResults": [{"topic": "Integration", "isCorrect": False}],
            "timeSpentPerSubject": {"Math": 90},
            "mistakePatterns": "Forgets constants",
        }
    )
    assert weak.weak_areas == ["Integration by parts"]

    notes = await assistant.process_notes(
        {"notesContent": "Photosynthesis converts light into chemical energy."}
    )
    assert len(notes.quiz_questions) == 5
    assert notes.flashcards[0].front == "Photosynthesis"

    motivation = await assistant.generate_motivation({"subjects": ["Math"], "streak": 4})
    assert motivation.daily_tip


async def test_notes_with_three_options_fails_validation():
    adapter = StubAdapter(
        texts={"process_notes": notes_json(options=["Chemical energy", "Heat", "Sound"])}
    )
    with pytest.raises(OutputSchemaViolation):
        await StudyAssistant(adapter).process_notes(
            {"notesContent": "Photosynthesis converts light into chemical energy."}
        )


async def test_notes_answer_outside_options_fails_validation():
    adapter = StubAdapter(texts={"process_notes": notes_json(correctAnswer="Light")})
    with pytest.raises(OutputSchemaViolation):
        await StudyAssistant(adapter).process_notes({"notesContent": "Notes"})


async def test_speech_wraps_pcm_in_wav(assistant, stub_adapter):
    result = await assistant.generate_speech({"text": "Hello there"})
    prefix = "data:audio/wav;base64,"
    assert result.audio_data_uri.startswith(prefix)
    wav_bytes = base64.b64decode(result.audio_data_uri[len(prefix):])
    with wave.open(io.BytesIO(wav_bytes), "rb") as reader:
        assert reader.getnchannels() == 1
        assert reader.getframerate() == 24000
        assert reader.readframes(reader.getnframes()) == PCM

    (call,) = stub_adapter.calls
    assert call == {
        "kind": "speech",
        "flow": "text_to_speech",
        "text": "Hello there",
        "voice": "Algenib",
    }


async def test_speech_without_media_raises_no_media_returned():
    assistant = StudyAssistant(StubAdapter(media=None))
    with pytest.raises(NoMediaReturned):
        await assistant.generate_speech({"text": "Hello", "voice": "Achernar"})


async def test_speech_with_corrupt_media_is_an_output_violation():
    adapter = StubAdapter(media=MediaPayload("audio/L16", "***"))
    with pytest.raises(OutputSchemaViolation):
        await StudyAssistant(adapter).generate_speech({"text": "Hello"})


async def test_provider_errors_propagate_unchanged():
    err = ModelInvocationError("explain_concept", "503 overloaded")
    adapter = StubAdapter(error=err)
    with pytest.raises(ModelInvocationError) as info:
        await StudyAssistant(adapter).explain_concept({"concept": "Entropy"})
    assert info.value is err
    assert len(adapter.calls) == 1


async def test_unknown_flow_name():
    with pytest.raises(UnknownFlow):
        await StudyAssistant(StubAdapter()).run("summarize_video", {})


async def test_concurrent_calls_are_independent(assistant, stub_adapter):
    concepts = [f"Concept {i}" for i in range(5)]
    results = await asyncio.gather(
        *(assistant.explain_concept({"concept": c}) for c in concepts)
    )
    assert len(results) == 5
    prompts = sorted(call["prompt"] for call in stub_adapter.calls)
    for concept in concepts:
        assert any(f"Concept: {concept}\n" in p for p in prompts)


def test_render_prompt_matches_what_run_sends(assistant, stub_adapter):
    data = {"concept": "Entropy"}
    expected = assistant.render_prompt("explain_concept", data)
    assistant.run_sync("explain_concept", data)
    assert stub_adapter.calls[0]["prompt"] == expected
    assert assistant.render_prompt("text_to_speech", {"text": "Read me"}) == "Read me"
