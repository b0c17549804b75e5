import json

from todo_service.generate_openapi import generate_openapi


def test_generate_openapi_writes_schema(tmp_path):
    out = tmp_path / "interfaces" / "openapi.json"
    written = generate_openapi(str(out))
    assert written == str(out)

    schema = json.loads(out.read_text(encoding="utf-8"))
    assert "/todos" in schema["paths"]
    assert "/todos/agenda" in schema["paths"]
    assert "/todos/{todo_id}" in schema["paths"]
    assert {"health", "todos"} <= {t["name"] for t in schema["tags"]}
