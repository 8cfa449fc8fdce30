import itertools
import logging
import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..db.persistent_slot import PersistentSlot
from ..models.session_models import ThemeHistoryItem
from ..tools.gemini_client import GeminiClient, GenerationError
from .derived_views import ThemeHistory
from .entity_collection import ServiceError

logger = logging.getLogger(__name__)

# Age group meaning "children of several ages together".
MIXED_AGE_GROUP = "Livre"

IDEAS_FALLBACK = "Não foi possível gerar sugestões. Tente novamente."
IDEAS_ERROR = "Ocorreu um erro ao buscar sugestões. Verifique sua chave de API e a conexão."
RANDOM_THEME_EMPTY = "A Criação do Mundo"
RANDOM_THEME_ERROR = "A Arca de Noé"
LESSON_PLAN_EMPTY = "Não foi possível gerar o plano de aula. Tente novamente."
LESSON_PLAN_ERROR = "Ocorreu um erro ao gerar o plano de aula. Tente novamente mais tarde."
IMAGE_MISSING = "Não foi possível gerar a imagem. Tente novamente."

_LIST_MARKER = re.compile(r"^[-*•\d.]+\s*")


class OutputKind(str, Enum):
    LESSON_PLAN = "lessonPlan"
    COLORING_IMAGE = "coloringImage"


class GenerationOutput(BaseModel):
    """What the theme generator currently shows for one output."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ticket: int = 0
    pending: bool = False
    value: Optional[str] = None
    error: Optional[str] = None


class ResultBoard:
    """
    Keeps the displayed result of each output kind.

    Every request takes a ticket; a result is only shown if its ticket is still
    the latest one for that output, so a slow earlier call can never overwrite
    the answer to a newer one.
    """

    def __init__(self):
        self._tickets = itertools.count(1)
        self._outputs: Dict[OutputKind, GenerationOutput] = {}

    def begin(self, kind: OutputKind) -> int:
        ticket = next(self._tickets)
        self._outputs[kind] = GenerationOutput(ticket=ticket, pending=True)
        return ticket

    def finish(self, kind: OutputKind, ticket: int, value: Optional[str] = None, error: Optional[str] = None) -> bool:
        current = self._outputs.get(kind)
        if current is None or current.ticket != ticket:
            logger.info(f"Discarding superseded {kind.value} result (ticket {ticket}).")
            return False
        self._outputs[kind] = GenerationOutput(ticket=ticket, pending=False, value=value, error=error)
        return True

    def get(self, kind: OutputKind) -> GenerationOutput:
        return self._outputs.get(kind, GenerationOutput())


def _lesson_ideas_prompt(age_group: str) -> str:
    if age_group == MIXED_AGE_GROUP:
        audience = "uma turma infantil multietária (várias idades juntas), com temas versáteis e adaptáveis"
    else:
        audience = f"crianças na faixa etária de {age_group}"
    return (
        f"Gere 5 sugestões de temas de aulas bíblicas para {audience}. "
        "Para cada tema, forneça um título criativo, uma breve descrição de uma linha e a referência bíblica principal. "
        "Formate a resposta como uma lista simples, com cada sugestão separada por uma nova linha."
    )


def _random_theme_prompt(age_group: str) -> str:
    return (
        f"Sugira um único tema bíblico criativo, curto e cativante para uma aula infantil (Faixa etária: {age_group}). "
        "Responda apenas com o título do tema, sem aspas, sem explicações e sem referências."
    )


def _variations_prompt(age_group: str, base_theme: str) -> str:
    return (
        f'Gere 5 variações de títulos criativos para uma aula bíblica infantil ESTRITAMENTE sobre o tema: "{base_theme}".\n'
        f"Faixa etária: {age_group}.\n"
        "Os títulos devem ser curtos, cativantes e despertar a curiosidade. Não fuja do assunto principal.\n"
        "Retorne APENAS a lista de títulos, um por linha, sem numeração, sem marcadores e sem descrições."
    )


def _lesson_plan_prompt(theme: str, age_group: Optional[str]) -> str:
    extra = ""
    if age_group == MIXED_AGE_GROUP:
        audience = " para uma turma multietária (crianças de várias idades juntas)"
        extra = "- **Dicas de Adaptação Multietária**: Como simplificar a atividade para os menores (2-5 anos) e aprofundar para os maiores (6-10+ anos).\n"
    elif age_group:
        audience = f" para crianças de {age_group}"
    else:
        audience = " para crianças"
    return (
        f'Crie um plano de aula bíblico detalhado{audience} sobre o tema "{theme}". '
        "A estrutura deve ser clara, envolvente e instrutiva. Inclua as seguintes seções, cada uma com um título em negrito:\n"
        "- **Título Criativo**: Um nome divertido e memorável para a aula.\n"
        "- **Referência Bíblica Principal**: Onde a história se encontra na Bíblia.\n"
        "- **Objetivo da Aula**: O que as crianças devem aprender ou sentir ao final.\n"
        "- **Introdução Lúdica**: Uma atividade rápida ou pergunta para captar a atenção das crianças.\n"
        "- **Contação da História**: Um resumo da história bíblica de forma simples e cativante.\n"
        "- **Atividade Prática**: Uma atividade manual ou brincadeira que reforce o ensinamento.\n"
        f"{extra}"
        "- **Oração Final**: Um exemplo de oração curta relacionada ao tema da aula.\n\n"
        "Formate a resposta de forma organizada."
    )


def _coloring_prompt(theme: str) -> str:
    return (
        f'Desenho para colorir para crianças, sobre "{theme}", com linhas pretas grossas e claras, fundo branco, '
        "estilo cartoon simples, sem texto, ideal para impressão. IMPORTANTE: os personagens humanos devem ser "
        "desenhados no estilo 'faceless' (SEM ROSTO), sem olhos, boca ou nariz."
    )


def clean_theme_lines(text: str) -> List[str]:
    """Splits a model answer into titles, dropping bullets, numbering and quotes."""
    titles = []
    for line in text.split("\n"):
        title = _LIST_MARKER.sub("", line.strip())
        title = title.replace('"', "").replace("'", "").strip()
        if title:
            titles.append(title)
    return titles


class ThemeService:
    """
    Theme generator and lesson-idea helpers on top of the generative AI client.

    Every AI failure degrades to a fallback text or an empty result; nothing
    raised by the client reaches the caller.
    """

    def __init__(self, client: GeminiClient, history_slot: PersistentSlot[List[ThemeHistoryItem]], board: ResultBoard, history_limit: int = 5):
        self.client = client
        self.history_slot = history_slot
        self.board = board
        self.history_limit = history_limit

    # ===== Search history =====

    async def get_history(self) -> List[ThemeHistoryItem]:
        return await self.history_slot.load()

    async def remember(self, theme: str, age_group: str) -> List[ThemeHistoryItem]:
        history = ThemeHistory(await self.history_slot.load(), limit=self.history_limit)
        items = history.push(ThemeHistoryItem(theme=theme, age_group=age_group))
        await self.history_slot.save(items)
        return items

    async def clear_history(self) -> None:
        await self.history_slot.save([])

    # ===== Text helpers =====

    async def lesson_ideas(self, age_group: str) -> List[str]:
        if not age_group.strip():
            raise ServiceError("An age group is required to suggest lesson ideas.")
        try:
            text = await self.client.generate_text(_lesson_ideas_prompt(age_group))
        except GenerationError as e:
            logger.error(f"Lesson ideas generation failed: {e}")
            return [IDEAS_ERROR]
        ideas = [line for line in text.split("\n") if line.strip()]
        return ideas or [IDEAS_FALLBACK]

    async def random_theme(self, age_group: str = "Crianças") -> str:
        try:
            text = await self.client.generate_text(_random_theme_prompt(age_group))
        except GenerationError as e:
            logger.error(f"Random theme generation failed: {e}")
            return RANDOM_THEME_ERROR
        return text.strip() or RANDOM_THEME_EMPTY

    async def theme_variations(self, age_group: str, base_theme: str) -> List[str]:
        if not base_theme.strip():
            raise ServiceError("Enter a theme to generate variations.")
        try:
            text = await self.client.generate_text(_variations_prompt(age_group, base_theme))
        except GenerationError as e:
            logger.error(f"Theme variations generation failed: {e}")
            return []
        return clean_theme_lines(text)[:5]

    # ===== Displayed outputs =====

    async def lesson_plan(self, theme: str, age_group: Optional[str] = None) -> GenerationOutput:
        if not theme.strip():
            raise ServiceError("A theme is required to generate a lesson plan.")
        await self.remember(theme, age_group or "")
        ticket = self.board.begin(OutputKind.LESSON_PLAN)
        # Anything that escapes below still settles the ticket as an error.
        plan, error = None, LESSON_PLAN_ERROR
        try:
            plan = await self.client.generate_text(_lesson_plan_prompt(theme, age_group)) or LESSON_PLAN_EMPTY
            error = None
        except GenerationError as e:
            logger.error(f"Lesson plan generation failed: {e}")
        finally:
            self.board.finish(OutputKind.LESSON_PLAN, ticket, value=plan, error=error)
        return self.board.get(OutputKind.LESSON_PLAN)

    async def coloring_image(self, theme: str) -> GenerationOutput:
        if not theme.strip():
            raise ServiceError("A theme is required to generate a coloring image.")
        ticket = self.board.begin(OutputKind.COLORING_IMAGE)
        image = None
        try:
            image = await self.client.generate_image(_coloring_prompt(theme))
        except GenerationError as e:
            logger.error(f"Coloring image generation failed: {e}")
        finally:
            if image:
                self.board.finish(OutputKind.COLORING_IMAGE, ticket, value=f"data:image/png;base64,{image}")
            else:
                self.board.finish(OutputKind.COLORING_IMAGE, ticket, error=IMAGE_MISSING)
        return self.board.get(OutputKind.COLORING_IMAGE)

    def output(self, kind: OutputKind) -> GenerationOutput:
        return self.board.get(kind)
