from exam_portal.core.config import Settings
from exam_portal.schemas.exam import ExamBase


def test_settings_read_dotenv():
    assert Settings.model_config["env_file"] == ".env"


def test_exam_schema_carries_example():
    schema = ExamBase.model_json_schema()
    assert schema["example"]["title"] == "Final Exam"
