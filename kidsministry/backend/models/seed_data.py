"""
Records a fresh dashboard starts with, used whenever a collection slot is
absent or cannot be read.
"""

from typing import List

from .entities import (
    Child, Teacher, Lesson, Photo, Message, AppEvent,
    TeacherRole, MessageType, EventType,
)


def initial_children() -> List[Child]:
    return [
        Child(id="c1", name="Lucas Silva", age=5, class_name="Sementinhas", guardian_name="Ana Silva", guardian_contact="(11) 98765-4321", notes="Muito participativo nas aulas."),
        Child(id="c2", name="Sofia Oliveira", age=7, class_name="Discípulos Mirins", guardian_name="Marcos Oliveira", guardian_contact="(11) 91234-5678", notes="Adora cantar nos louvores."),
        Child(id="c3", name="Davi Costa", age=6, class_name="Sementinhas", guardian_name="Carla Costa", guardian_contact="(11) 95555-1234", notes="Precisa de incentivo para interagir."),
    ]


def initial_teachers() -> List[Teacher]:
    return [
        Teacher(id="t1", name="Tia Carol", role=TeacherRole.LEADER, assigned_class="Sementinhas", contact="(11) 99999-8888"),
        Teacher(id="t2", name="Tio Pedro", role=TeacherRole.ASSISTANT, assigned_class="Discípulos Mirins", contact="(11) 97777-6666"),
        Teacher(id="t3", name="Irmã Maria", role=TeacherRole.VOLUNTEER, assigned_class="Todas", contact="(11) 96666-5555"),
    ]


def initial_lessons() -> List[Lesson]:
    return [
        Lesson.model_validate({
            "id": "l1", "title": "A Criação do Mundo", "date": "2024-08-04", "ageGroup": "4-6 anos",
            "materials": [{"type": "Vídeo", "url": "https://youtube.com/watch?v=example1"}],
            "description": "Gênesis 1. Ensinar sobre os 7 dias da criação.",
        }),
        Lesson.model_validate({
            "id": "l2", "title": "Davi e Golias", "date": "2024-08-11", "ageGroup": "7-9 anos",
            "materials": [{"type": "PDF", "url": "#"}, {"type": "Imagem", "url": "#"}],
            "description": "1 Samuel 17. A história de coragem e fé de Davi.",
        }),
    ]


def initial_photos() -> List[Photo]:
    return [
        Photo(id="p1", url="https://picsum.photos/400/300?random=1", caption="Nossa turminha na aula sobre a Arca de Noé!", date="2024-07-21"),
        Photo(id="p2", url="https://picsum.photos/400/300?random=2", caption="Atividade de pintura sobre a criação.", date="2024-07-21"),
        Photo(id="p3", url="https://picsum.photos/400/300?random=3", caption="Momento de louvor e adoração.", date="2024-07-28"),
    ]


def initial_messages() -> List[Message]:
    return [
        Message(id="m1", type=MessageType.PARENT_NOTICE, content="Lembrete: Próximo domingo teremos nossa gincana bíblica! Tragam as crianças com roupas confortáveis.", author="Coordenação", timestamp="2024-07-29 10:00"),
        Message(id="m2", type=MessageType.TEACHERS, content="Reunião de planejamento na próxima quarta-feira às 19h para definirmos as aulas de setembro.", author="Tia Carol", timestamp="2024-07-28 15:30"),
        Message(id="m3", type=MessageType.PRAYER_REQUEST, content="Oração pela família do pequeno João, que está passando por um momento difícil.", author="Tio Pedro", timestamp="2024-07-29 09:00"),
    ]


def initial_events() -> List[AppEvent]:
    return [
        AppEvent.model_validate({"id": "e1", "title": "Culto de Páscoa", "date": "2024-08-18", "type": EventType.KIDS_SERVICE, "description": "Celebração especial de Páscoa com teatrinho e louvores."}),
        AppEvent.model_validate({"id": "e2", "title": "Ensaio para o Dia das Mães", "date": "2024-08-25", "type": EventType.REHEARSAL, "description": "Ensaio da apresentação para o culto do Dia das Mães."}),
    ]
