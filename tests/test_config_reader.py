"""Tests for the shared config file reader."""

from aws_profile_picker.config_reader import ConfigReader, merge_profiles


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestConfigReader:
    def test_reads_config_profiles(self, tmp_path):
        config = _write(
            tmp_path / "config",
            "[default]\nregion = us-east-1\n\n"
            "[profile prod]\nregion = us-west-2\n\n"
            "[profile prod-admin]\nsource_profile = prod\nrole_arn = arn:aws:iam::111:role/Admin\n\n"
            "[sso-session corp]\nsso_start_url = https://corp.awsapps.com/start\n",
        )
        reader = ConfigReader(config, tmp_path / "missing")
        profiles = reader.load()

        assert [p.name for p in profiles] == ["default", "prod", "prod-admin"]
        assert profiles[1].region == "us-west-2"
        assert profiles[2].source_profile == "prod"

    def test_config_wins_over_credentials(self, tmp_path):
        config = _write(tmp_path / "config", "[profile alpha]\nregion = us-east-1\n")
        creds = _write(
            tmp_path / "credentials",
            "[alpha]\naws_access_key_id = AKIA1\n\n[beta]\naws_access_key_id = AKIA2\n",
        )
        profiles = ConfigReader(config, creds).load()
        assert [p.name for p in profiles] == ["alpha"]

    def test_falls_back_to_credentials(self, tmp_path):
        creds = _write(
            tmp_path / "credentials",
            "[default]\naws_access_key_id = AKIA1\n\n"
            "[tools]\ncredential_process = /usr/bin/fetch-creds\nregion = eu-west-1\n",
        )
        profiles = ConfigReader(tmp_path / "missing", creds).load()

        assert [p.name for p in profiles] == ["default", "tools"]
        assert profiles[1].credential_process == "/usr/bin/fetch-creds"
        assert profiles[1].region == "eu-west-1"

    def test_region_from_credentials_entry(self, tmp_path):
        config = _write(tmp_path / "config", "[profile alpha]\noutput = json\n")
        creds = _write(tmp_path / "credentials", "[alpha]\nregion = ap-south-1\n")
        profiles = ConfigReader(config, creds).load()
        assert profiles[0].region == "ap-south-1"

    def test_region_from_include_profile(self, tmp_path):
        config = _write(
            tmp_path / "config",
            "[profile X]\ninclude_profile = Y\n\n[profile Y]\nregion = us-east-1\n",
        )
        profiles = ConfigReader(config, tmp_path / "missing").load()
        by_name = {p.name: p for p in profiles}
        assert by_name["X"].region == "us-east-1"

    def test_missing_files(self, tmp_path):
        reader = ConfigReader(tmp_path / "nope", tmp_path / "nada")
        assert reader.load() == []

    def test_unparseable_file(self, tmp_path):
        config = _write(tmp_path / "config", "region = us-east-1\nnot an ini file\n")
        assert ConfigReader(config, tmp_path / "missing").load() == []

    def test_default_paths_from_environment(self, tmp_path, monkeypatch):
        config = _write(tmp_path / "cfg", "[profile env-profile]\nregion = eu-north-1\n")
        monkeypatch.setenv("AWS_CONFIG_FILE", str(config))
        profiles = ConfigReader().load()
        assert [p.name for p in profiles] == ["env-profile"]

    def test_default_paths_under_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("AWS_CONFIG_FILE")
        monkeypatch.delenv("AWS_SHARED_CREDENTIALS_FILE")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)
        reader = ConfigReader()
        assert reader.config_path == tmp_path / ".aws" / "config"
        assert reader.credentials_path == tmp_path / ".aws" / "credentials"


class TestMergeProfiles:
    def test_empty_sources(self):
        assert merge_profiles({}, {}) == []

    def test_include_profile_region_only_from_config(self):
        profiles = merge_profiles(
            {"X": {"include_profile": "Y"}, "Y": {"region": "us-east-1"}},
            {},
        )
        assert profiles[0].region == "us-east-1"

    def test_own_region_beats_include_profile(self):
        profiles = merge_profiles(
            {"X": {"include_profile": "Y", "region": "eu-west-1"}, "Y": {"region": "us-east-1"}},
            {},
        )
        assert profiles[0].region == "eu-west-1"

    def test_unknown_include_profile(self):
        profiles = merge_profiles({"X": {"include_profile": "ghost"}}, {})
        assert profiles[0].region is None
