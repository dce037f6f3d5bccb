from pathlib import Path

import pytest

from newsdesk.rules.loader import load_rules, parse_rules
from newsdesk.rules.models import Rules

PROJECT_RULES = Path(__file__).resolve().parents[2] / "rules.yaml"


def test_project_rules_file_loads():
    rules = load_rules(PROJECT_RULES)

    assert isinstance(rules, Rules)
    assert rules.subscriptions.confirmation_subject == "Welcome!"
    assert rules.subscribers.name.max_length == 256
    assert set(rules.subscribers.name.forbidden_characters) == set('/()"<>\\{}')
    assert rules.email.adapter == "dev"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_empty_content_gives_defaults():
    rules = parse_rules("")
    assert rules.app.confirmation_path == "/subscriptions/confirm"
    assert rules.subscriptions.max_attempts == 3
    assert rules.storage.db_filename == "newsdesk.db"


def test_fenced_yaml_block_is_accepted():
    content = """# Rules

Some prose the loader ignores.

```yaml
app:
  base_url: "https://news.example.com/"
```
"""
    rules = parse_rules(content)
    assert rules.app.base_url == "https://news.example.com"


def test_invalid_yaml_is_value_error():
    with pytest.raises(ValueError, match="Invalid YAML"):
        parse_rules("app: [unclosed")


@pytest.mark.parametrize(
    "content",
    [
        "subscriptions:\n  max_attempts: 0\n",
        "email:\n  adapter: smtp\n",
        "email:\n  timeout_seconds: -1\n",
        "storage:\n  busy_timeout_seconds: 0\n",
    ],
)
def test_schema_violations_are_value_errors(content):
    with pytest.raises(ValueError, match="Rules validation failed"):
        parse_rules(content)
