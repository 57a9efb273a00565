"""Unit tests for dispenser address QR codes."""

import segno

from modules.qr_code import address_qr_data_uri


ADDRESS = "bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh"


class TestAddressQrDataUri:
    def test_svg_data_uri(self):
        uri = address_qr_data_uri(ADDRESS)

        assert uri.startswith("data:image/svg+xml")
        assert "orange" in uri

    def test_matches_segno_encoding_of_address(self):
        expected = segno.make_qr(ADDRESS, error="m").svg_data_uri(
            scale=4, border=2, dark="black", light="orange"
        )
        assert address_qr_data_uri(ADDRESS) == expected

    def test_different_addresses_differ(self):
        assert address_qr_data_uri(ADDRESS) != address_qr_data_uri(ADDRESS[:-1] + "x")

    def test_empty_address(self):
        assert address_qr_data_uri("") == ""
