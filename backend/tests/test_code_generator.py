import re

from giftcoupons.services.code_generator import generate_coupon_code, normalize_prefix


def test_prefix_is_sanitised_and_uppercased():
    code = generate_coupon_code("g!f t")
    assert re.fullmatch(r"GFT-[0-9A-F]{12}", code)


def test_empty_prefix_yields_bare_suffix():
    assert re.fullmatch(r"[0-9A-F]{12}", generate_coupon_code(""))
    assert re.fullmatch(r"[0-9A-F]{12}", generate_coupon_code(None))


def test_prefix_of_only_symbols_is_dropped():
    assert re.fullmatch(r"[0-9A-F]{12}", generate_coupon_code("-- !!"))


def test_prefix_truncated_to_ten_characters():
    assert normalize_prefix("summer-sale-2026") == "SUMMERSALE"
    assert generate_coupon_code("abcdefghijklmnop").startswith("ABCDEFGHIJ-")


def test_codes_differ_between_calls():
    codes = {generate_coupon_code("GIFT") for _ in range(200)}
    assert len(codes) == 200
