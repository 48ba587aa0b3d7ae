import pytest

from conftest import REF
from session_trainer.case_generator import SessionCaseGenerator
from session_trainer.errors import ServiceError, ValidationError


@pytest.mark.parametrize("expertise", ["", "   ", "\n\t", None])
def test_blank_expertise_issues_no_request(fake_client, expertise):
    generator = SessionCaseGenerator(fake_client, REF)
    with pytest.raises(ValidationError):
        generator.generate_case(expertise)
    assert fake_client.case_calls == []


def test_sends_trimmed_expertise_and_returns_raw_scenario(fake_client):
    generator = SessionCaseGenerator(fake_client, REF)
    scenario = generator.generate_case("  product management  ")
    assert fake_client.case_calls == ["product management"]
    assert scenario == fake_client.case_text


def test_remote_failure_propagates(fake_client):
    fake_client.fail_case = ServiceError("upstream down", status_code=503)
    generator = SessionCaseGenerator(fake_client, REF)
    with pytest.raises(ServiceError) as info:
        generator.generate_case("sales")
    assert info.value.status_code == 503
    assert len(fake_client.case_calls) == 1


def test_empty_scenario_is_a_service_error(fake_client):
    fake_client.case_text = "  "
    generator = SessionCaseGenerator(fake_client, REF)
    with pytest.raises(ServiceError):
        generator.generate_case("sales")
