import re

from agv_rebrand.storage.local import public_url, save_generated_image


def test_saved_file_name_carries_prefix_identifier_and_unique_id(public_dir):
    name = save_generated_image(b"data", "10001088", ext=".PNG")

    assert re.fullmatch(r"agv_rebrand_10001088_[0-9a-f]{32}\.png", name)
    assert (public_dir / name).read_bytes() == b"data"


def test_identifier_is_sanitised(public_dir):
    name = save_generated_image(b"data", "../10001088")

    assert name.startswith("agv_rebrand_10001088_")
    assert (public_dir / name).exists()


def test_public_url_joins_base_and_prefix():
    assert public_url("http://localhost:3000/", "a.png") == "http://localhost:3000/public/a.png"
