from kidsministry.backend.tools.gemini_client import GenerationError

API = "/api/v1/themes"


def test_outputs_are_empty_at_start(logged_in_client):
    outputs = logged_in_client.get(f"{API}/output").json()
    assert outputs["lessonPlan"]["value"] is None
    assert outputs["coloringImage"]["pending"] is False

def test_lesson_plan(logged_in_client, mock_gemini):
    mock_gemini.generate_text.return_value = "Plano da aula"

    response = logged_in_client.post(f"{API}/lesson-plan", json={"theme": "Davi e Golias", "ageGroup": "7-9 anos"})

    assert response.status_code == 200
    assert response.json()["value"] == "Plano da aula"
    assert logged_in_client.get(f"{API}/output").json()["lessonPlan"]["value"] == "Plano da aula"
    assert logged_in_client.get(f"{API}/history").json() == [{"theme": "Davi e Golias", "ageGroup": "7-9 anos"}]

def test_lesson_plan_failure_is_reported_in_the_output(logged_in_client, mock_gemini):
    mock_gemini.generate_text.side_effect = GenerationError("boom")

    response = logged_in_client.post(f"{API}/lesson-plan", json={"theme": "Jonas"})

    assert response.status_code == 200
    assert response.json()["error"] is not None

def test_blank_theme_is_rejected(logged_in_client):
    assert logged_in_client.post(f"{API}/lesson-plan", json={"theme": ""}).status_code == 422
    assert logged_in_client.post(f"{API}/lesson-plan", json={"theme": "   "}).status_code == 400

def test_coloring_image(logged_in_client, mock_gemini):
    mock_gemini.generate_image.return_value = "QUJD"

    response = logged_in_client.post(f"{API}/coloring-image", json={"theme": "Arca de Noé"})

    assert response.status_code == 200
    assert response.json()["value"] == "data:image/png;base64,QUJD"
    assert logged_in_client.get(f"{API}/output").json()["coloringImage"]["value"] == "data:image/png;base64,QUJD"

def test_random_theme(logged_in_client, mock_gemini):
    mock_gemini.generate_text.return_value = "O Filho Pródigo\n"
    assert logged_in_client.post(f"{API}/random", json={}).json() == {"theme": "O Filho Pródigo"}

def test_theme_variations(logged_in_client, mock_gemini):
    mock_gemini.generate_text.return_value = "- Jonas e o peixe\n- Jonas em Nínive"

    response = logged_in_client.post(f"{API}/variations", json={"theme": "Jonas", "ageGroup": "4-6 anos"})

    assert response.json() == ["Jonas e o peixe", "Jonas em Nínive"]

def test_clear_history(logged_in_client, mock_gemini):
    mock_gemini.generate_text.return_value = "Plano"
    logged_in_client.post(f"{API}/lesson-plan", json={"theme": "Jonas"})

    assert logged_in_client.delete(f"{API}/history").status_code == 204
    assert logged_in_client.get(f"{API}/history").json() == []
