import json
from unittest import mock

import ec2metadata


class TestMain:
    def test_fields(self, tmp_path, offline, capsys):
        rc = ec2metadata.main(
            ["--dummy", "--cache-dir", str(tmp_path), "InstanceId", "BlockDeviceMapping"]
        )
        assert 0 == rc
        out = capsys.readouterr().out.splitlines()
        assert "InstanceId: i-87654321" in out
        assert (
            'BlockDeviceMapping: {"ebs0": "sda", "ephemeral0": "sdb", "root": "/dev/sda1"}'
            in out
        )

    def test_all_as_json(self, tmp_path, offline, capsys):
        rc = ec2metadata.main(["--dummy", "--cache-dir", str(tmp_path), "--json"])
        assert 0 == rc
        response = json.loads(capsys.readouterr().out)
        assert "ap-northeast-1c" == response["Placement"]
        assert "my-public-key" == response["PublicKeys"][0]["keyname"]

    def test_unknown_field(self, tmp_path, offline, capsys):
        rc = ec2metadata.main(["--dummy", "--cache-dir", str(tmp_path), "Nope"])
        assert 1 == rc
        assert "Nope" in capsys.readouterr().err

    def test_not_on_ec2(self, tmp_path, offline, capsys):
        rc = ec2metadata.main(["--cache-dir", str(tmp_path), "--timeout", "0.5", "Mac"])
        assert 1 == rc
        assert "outside EC2" in capsys.readouterr().err
        assert 0.5 == offline.call_args.kwargs["timeout"]

    def test_cache_dir_from_environment(self, tmp_path, endpoint, capsys):
        with mock.patch.dict("os.environ", {"EC2_METADATA_CACHE_DIR": str(tmp_path)}):
            assert 0 == ec2metadata.main(["Mac"])
        assert list(tmp_path.glob("*.json"))

    def test_dummy_run_leaves_no_cache_file(self, tmp_path, offline, capsys):
        assert 0 == ec2metadata.main(["--dummy", "--cache-dir", str(tmp_path)])
        assert [] == list(tmp_path.glob("*.json"))

    def test_failed_field_prints_not_available(self, tmp_path, endpoint, capsys):
        rc = ec2metadata.main(["--cache-dir", str(tmp_path), "AncestorAmiIds", "Mac"])
        assert 0 == rc
        out = capsys.readouterr().out.splitlines()
        assert "AncestorAmiIds: not available" in out
        assert "Mac: 11:22:33:44:55:66" in out

    def test_failed_field_is_null_in_json(self, tmp_path, endpoint, capsys):
        rc = ec2metadata.main(["--cache-dir", str(tmp_path), "--json", "AncestorAmiIds"])
        assert 0 == rc
        assert {"AncestorAmiIds": None} == json.loads(capsys.readouterr().out)

    def test_unwritable_cache_file_still_prints(self, tmp_path, endpoint, capsys):
        with mock.patch(
            "ec2_metadata_getter.cache.cache.open", create=True, side_effect=PermissionError("denied")
        ):
            rc = ec2metadata.main(["--cache-dir", str(tmp_path), "InstanceId"])
        assert 0 == rc
        assert "InstanceId: i-87654321" in capsys.readouterr().out.splitlines()
