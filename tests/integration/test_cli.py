import json
import pytest
import yaml
from click.testing import CliRunner
from rcompose.CLI.main import cli
from rcompose.MODELS.container_spec import ContainerSpec
from rcompose.PARSERS.label_recovery import embed_spec

COMPOSE = """
namespace: shop
containers:
  web:
    image: "nginx:{{ version }}"
    ports: ["8080:80", "8081:80"]
    volumes: ["/cache", "./html:/usr/share/nginx/html:ro"]
  db:
    image: postgres:13
    restart: "no"
"""

@pytest.fixture
def compose_file(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text(COMPOSE)
    return str(path)

def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'render' in result.output
    assert 'recover' in result.output

def test_render_no_file():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', 'non_existent.yml', 'render'])
    assert result.exit_code == 1
    assert 'Error: non_existent.yml not found.' in result.output

def test_render(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, '--var', 'version=1.25', 'render'])
    assert result.exit_code == 0, result.output

    output = json.loads(result.stdout)
    assert set(output) == {"shop.web", "shop.db"}

    web = output["shop.web"]
    assert web["Config"]["Image"] == "nginx:1.25"
    assert web["Config"]["ExposedPorts"] == {"80/tcp": {}}
    assert web["Config"]["Volumes"] == {"/cache": {}}
    assert web["HostConfig"]["Binds"] == ["./html:/usr/share/nginx/html:ro"]
    assert web["HostConfig"]["PortBindings"]["80/tcp"] == [{"HostPort": "8080"}, {"HostPort": "8081"}]
    assert web["HostConfig"]["RestartPolicy"] == {"Name": "always", "MaximumRetryCount": 0}

    assert output["shop.db"]["HostConfig"]["RestartPolicy"] == {"Name": "no", "MaximumRetryCount": 0}

def test_render_selected_and_embedded(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, '--var', 'version=1', 'render', '--embed', 'db'])
    assert result.exit_code == 0, result.output

    output = json.loads(result.stdout)
    assert list(output) == ["shop.db"]
    assert "rcompose-config" in output["shop.db"]["Config"]["Labels"]

def test_render_unknown_container(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, '--var', 'version=1', 'render', 'cache'])
    assert result.exit_code == 1
    assert 'unknown container(s): cache' in result.output

def test_render_template_error(compose_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', compose_file, 'render'])
    assert result.exit_code == 1
    assert 'template error' in result.output

def test_render_bad_var():
    runner = CliRunner()
    result = runner.invoke(cli, ['--var', 'novalue', 'render'])
    assert result.exit_code == 2

def test_recover(tmp_path):
    spec = ContainerSpec(image="redis:7", labels={"team": "cache", "rcompose-id": "shop.cache"})
    records = [
        {"Id": "a" * 64, "Name": "/shop.cache", "Config": {"Labels": {**spec.labels, **embed_spec(spec)}}},
        {"Id": "b" * 64, "Name": "/foreign", "Config": {"Labels": {}}},
    ]
    inspect_file = tmp_path / "inspect.json"
    inspect_file.write_text(json.dumps(records))

    runner = CliRunner()
    output_file = tmp_path / "recovered.yml"
    result = runner.invoke(cli, ['recover', str(inspect_file), '-o', str(output_file)])
    assert result.exit_code == 0, result.output
    assert 'Skipping' in result.output

    recovered = yaml.safe_load(output_file.read_text())
    assert recovered == {"containers": {"shop.cache": {"image": "redis:7", "labels": {"team": "cache"}}}}

def test_recover_malformed(tmp_path):
    record = {"Id": "c" * 64, "Name": "/broken", "Config": {"Labels": {"rcompose-config": "image: [oops"}}}
    inspect_file = tmp_path / "inspect.json"
    inspect_file.write_text(json.dumps(record))

    runner = CliRunner()
    result = runner.invoke(cli, ['recover', str(inspect_file)])
    assert result.exit_code == 1
    assert 'broken' in result.output

def test_recover_invalid_json(tmp_path):
    inspect_file = tmp_path / "inspect.json"
    inspect_file.write_text("not json")

    runner = CliRunner()
    result = runner.invoke(cli, ['recover', str(inspect_file)])
    assert result.exit_code == 1
    assert 'invalid inspect output' in result.output
