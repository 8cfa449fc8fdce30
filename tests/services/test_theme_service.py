import asyncio

import httpx
import pytest
import pytest_asyncio

from kidsministry.backend.services.entity_collection import ServiceError
from kidsministry.backend.services.theme_service import (
    IDEAS_ERROR, IDEAS_FALLBACK, IMAGE_MISSING, LESSON_PLAN_EMPTY, LESSON_PLAN_ERROR,
    RANDOM_THEME_EMPTY, RANDOM_THEME_ERROR,
    OutputKind, ResultBoard, ThemeService, clean_theme_lines,
)
from kidsministry.backend.tools.gemini_client import GeminiClient, GenerationError


@pytest.fixture
def theme_service(app_state, mock_gemini) -> ThemeService:
    return ThemeService(client=mock_gemini, history_slot=app_state.theme_history_slot, board=ResultBoard(), history_limit=5)


def test_clean_theme_lines_strips_markers_and_quotes():
    text = '1. "Davi, o pequeno gigante"\n- Coragem de pastor\n\n* \'Fé que vence\'\n'
    assert clean_theme_lines(text) == ["Davi, o pequeno gigante", "Coragem de pastor", "Fé que vence"]


class TestResultBoard:

    def test_untouched_output_is_empty(self):
        output = ResultBoard().get(OutputKind.LESSON_PLAN)
        assert output.value is None
        assert output.pending is False

    def test_begin_marks_pending(self):
        board = ResultBoard()
        board.begin(OutputKind.COLORING_IMAGE)
        assert board.get(OutputKind.COLORING_IMAGE).pending is True

    def test_superseded_result_is_discarded(self):
        board = ResultBoard()
        first = board.begin(OutputKind.LESSON_PLAN)
        second = board.begin(OutputKind.LESSON_PLAN)

        assert board.finish(OutputKind.LESSON_PLAN, second, value="new") is True
        assert board.finish(OutputKind.LESSON_PLAN, first, value="old") is False
        assert board.get(OutputKind.LESSON_PLAN).value == "new"

    def test_outputs_are_independent(self):
        board = ResultBoard()
        plan = board.begin(OutputKind.LESSON_PLAN)
        board.begin(OutputKind.COLORING_IMAGE)
        assert board.finish(OutputKind.LESSON_PLAN, plan, value="plan") is True
        assert board.get(OutputKind.COLORING_IMAGE).pending is True


@pytest.mark.asyncio
class TestThemeService:

    # --- Lesson ideas ---

    async def test_lesson_ideas_split_lines(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "Ideia 1\n\nIdeia 2\n"
        assert await theme_service.lesson_ideas("4-6 anos") == ["Ideia 1", "Ideia 2"]

    async def test_lesson_ideas_for_mixed_ages_use_multi_age_prompt(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "Ideia"
        await theme_service.lesson_ideas("Livre")
        assert "multietária" in mock_gemini.generate_text.call_args[0][0]

    async def test_lesson_ideas_empty_answer_falls_back(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "  \n"
        assert await theme_service.lesson_ideas("4-6 anos") == [IDEAS_FALLBACK]

    async def test_lesson_ideas_failure_falls_back(self, theme_service, mock_gemini):
        mock_gemini.generate_text.side_effect = GenerationError("boom")
        assert await theme_service.lesson_ideas("4-6 anos") == [IDEAS_ERROR]

    async def test_lesson_ideas_need_an_age_group(self, theme_service, mock_gemini):
        with pytest.raises(ServiceError):
            await theme_service.lesson_ideas("   ")
        mock_gemini.generate_text.assert_not_called()

    # --- Random theme and variations ---

    async def test_random_theme_is_trimmed(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "  O Bom Samaritano \n"
        assert await theme_service.random_theme() == "O Bom Samaritano"

    async def test_random_theme_fallbacks(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = ""
        assert await theme_service.random_theme() == RANDOM_THEME_EMPTY

        mock_gemini.generate_text.side_effect = GenerationError("boom")
        assert await theme_service.random_theme() == RANDOM_THEME_ERROR

    async def test_variations_are_cleaned(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = '1. "Jonas e o grande peixe"\n2. Fugindo de Deus'
        assert await theme_service.theme_variations("Crianças", "Jonas") == ["Jonas e o grande peixe", "Fugindo de Deus"]

    async def test_variations_failure_is_empty(self, theme_service, mock_gemini):
        mock_gemini.generate_text.side_effect = GenerationError("boom")
        assert await theme_service.theme_variations("Crianças", "Jonas") == []

    async def test_variations_need_a_theme(self, theme_service):
        with pytest.raises(ServiceError):
            await theme_service.theme_variations("Crianças", "")

    # --- Lesson plan ---

    async def test_lesson_plan_is_shown_and_remembered(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "**Título Criativo**: ..."

        output = await theme_service.lesson_plan("Davi e Golias", "7-9 anos")

        assert output.value == "**Título Criativo**: ..."
        assert output.pending is False
        assert output.error is None
        history = await theme_service.get_history()
        assert [(h.theme, h.age_group) for h in history] == [("Davi e Golias", "7-9 anos")]

    async def test_lesson_plan_empty_answer(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = ""
        assert (await theme_service.lesson_plan("Jonas")).value == LESSON_PLAN_EMPTY

    async def test_lesson_plan_failure_sets_error(self, theme_service, mock_gemini):
        mock_gemini.generate_text.side_effect = GenerationError("boom")

        output = await theme_service.lesson_plan("Jonas")

        assert output.value is None
        assert output.error == LESSON_PLAN_ERROR

    async def test_lesson_plan_needs_a_theme(self, theme_service):
        with pytest.raises(ServiceError):
            await theme_service.lesson_plan(" ")
        assert await theme_service.get_history() == []

    async def test_slow_older_plan_does_not_overwrite_newer_one(self, theme_service, mock_gemini):
        release = asyncio.Event()

        async def answer(prompt):
            if "Arca" in prompt:
                await release.wait()
                return "old plan"
            return "new plan"
        mock_gemini.generate_text.side_effect = answer

        slow = asyncio.create_task(theme_service.lesson_plan("A Arca de Noé"))
        for _ in range(5):
            await asyncio.sleep(0)
        await theme_service.lesson_plan("Davi e Golias")
        release.set()
        await slow

        assert theme_service.output(OutputKind.LESSON_PLAN).value == "new plan"

    async def test_history_is_deduplicated_and_capped(self, theme_service, mock_gemini):
        mock_gemini.generate_text.return_value = "plano"
        for theme in ["1", "2", "3", "4", "5", "6", "3"]:
            await theme_service.lesson_plan(theme)

        assert [h.theme for h in await theme_service.get_history()] == ["3", "6", "5", "4", "2"]

        await theme_service.clear_history()
        assert await theme_service.get_history() == []

    # --- Coloring image ---

    async def test_coloring_image_is_a_data_uri(self, theme_service, mock_gemini):
        mock_gemini.generate_image.return_value = "iVBORw0KGgo="

        output = await theme_service.coloring_image("Arca de Noé")

        assert output.value == "data:image/png;base64,iVBORw0KGgo="
        assert "SEM ROSTO" in mock_gemini.generate_image.call_args[0][0]

    async def test_coloring_image_missing(self, theme_service, mock_gemini):
        mock_gemini.generate_image.return_value = None
        assert (await theme_service.coloring_image("Arca de Noé")).error == IMAGE_MISSING

        mock_gemini.generate_image.side_effect = GenerationError("boom")
        assert (await theme_service.coloring_image("Arca de Noé")).error == IMAGE_MISSING

    async def test_unexpected_failure_does_not_leave_the_plan_pending(self, theme_service, mock_gemini):
        mock_gemini.generate_text.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await theme_service.lesson_plan("Jonas")

        output = theme_service.output(OutputKind.LESSON_PLAN)
        assert output.pending is False
        assert output.error == LESSON_PLAN_ERROR

    async def test_unexpected_failure_does_not_leave_the_image_pending(self, theme_service, mock_gemini):
        mock_gemini.generate_image.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await theme_service.coloring_image("Arca de Noé")

        output = theme_service.output(OutputKind.COLORING_IMAGE)
        assert output.pending is False
        assert output.error == IMAGE_MISSING


@pytest_asyncio.fixture
async def http_theme_service(app_state):
    async with httpx.AsyncClient() as http_client:
        client = GeminiClient(http_client=http_client, api_key="test-key", base_url="https://gemini.example/v1beta", text_model="text-model", image_model="image-model")
        yield ThemeService(client=client, history_slot=app_state.theme_history_slot, board=ResultBoard())


@pytest.mark.asyncio
async def test_malformed_gemini_answer_becomes_the_plan_error(http_theme_service, httpx_mock):
    httpx_mock.add_response(method="POST", json={"candidates": [{"content": {"parts": "oops"}}]})

    output = await http_theme_service.lesson_plan("Jonas", "4-6 anos")

    assert output.pending is False
    assert output.value is None
    assert output.error == LESSON_PLAN_ERROR
