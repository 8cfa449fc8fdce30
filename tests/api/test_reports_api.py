import pytest

API = "/api/v1"


def test_dashboard(logged_in_client):
    response = logged_in_client.get(f"{API}/dashboard")

    assert response.status_code == 200
    summary = response.json()
    assert summary["childrenCount"] == 3
    assert summary["teachersCount"] == 3
    assert summary["lessonsCount"] == 2
    assert summary["presentChildrenCount"] == 0
    assert summary["classDistribution"] == [{"label": "Sementinhas", "count": 2}, {"label": "Discípulos Mirins", "count": 1}]
    assert [m["id"] for m in summary["recentMessages"]] == ["m1", "m2", "m3"]

def test_dashboard_counts_present_children(logged_in_client):
    logged_in_client.post(f"{API}/children/c2/toggle/present")
    assert logged_in_client.get(f"{API}/dashboard").json()["presentChildrenCount"] == 1

def test_report_rows(logged_in_client):
    assert logged_in_client.get(f"{API}/reports/children-by-class").json()[0] == {"Turma": "Sementinhas", "Quantidade de Crianças": 2}
    assert logged_in_client.get(f"{API}/reports/lesson-attendance").json()[1] == {"Aula": "Davi e Golias", "Data": "11/08/2024", "Presentes": "0 / 3"}
    assert logged_in_client.get(f"{API}/reports/teachers").json()[2]["Função"] == "Voluntário"

@pytest.mark.parametrize("report, filename", [
    ("children-by-class", "criancas_por_turma.csv"),
    ("lesson-attendance", "presenca_por_aula.csv"),
    ("teachers", "lista_de_professores.csv"),
])
def test_csv_downloads(logged_in_client, report, filename):
    response = logged_in_client.get(f"{API}/reports/{report}/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert filename in response.headers["content-disposition"]
    assert response.content.startswith(b"\xef\xbb\xbf")

def test_empty_export_is_not_found(logged_in_client):
    for teacher in logged_in_client.get(f"{API}/teachers").json():
        token = logged_in_client.post(f"{API}/teachers/{teacher['id']}/deletion-requests").json()["confirmationToken"]
        logged_in_client.delete(f"{API}/teachers/{teacher['id']}", params={"confirmationToken": token})

    assert logged_in_client.get(f"{API}/reports/teachers").json() == []
    assert logged_in_client.get(f"{API}/reports/teachers/export").status_code == 404
