from collections import namedtuple
from unittest.mock import MagicMock, Mock, patch

from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from evplanner.domain.types import Coordinate
from evplanner.services.city_locator import CityLocator
from evplanner.services.geocoding import GeocodedPoint, GeocodingError, LocationNotFoundError, geocode_location

PostalRow = namedtuple("PostalRow", ["place_name", "state_name", "latitude", "longitude"])


class GeocodingServiceTests(SimpleTestCase):
    def setUp(self):
        cache.clear()

    @patch("evplanner.services.geocoding._remote_lookup")
    @patch("evplanner.services.geocoding._local_lookup")
    def test_prefers_local_lookup_before_remote(self, mock_local_lookup, mock_remote_lookup):
        mock_local_lookup.return_value = GeocodedPoint(
            latitude=11.87,
            longitude=75.37,
            display_name="Kannur, Kerala",
            source="pgeocode-local",
        )

        result = geocode_location("Kannur", region_hint="Kerala")

        self.assertEqual(result.source, "pgeocode-local")
        self.assertEqual(result.coordinate, Coordinate(latitude=11.87, longitude=75.37))
        mock_local_lookup.assert_called_once_with("Kannur", "Kerala")
        mock_remote_lookup.assert_not_called()

    @patch("evplanner.services.geocoding._remote_lookup")
    @patch("evplanner.services.geocoding._local_lookup")
    def test_uses_remote_lookup_when_local_misses(self, mock_local_lookup, mock_remote_lookup):
        mock_local_lookup.return_value = None
        mock_remote_lookup.return_value = GeocodedPoint(
            latitude=9.93,
            longitude=76.26,
            display_name="Kochi, Ernakulam, Kerala, India",
            source="nominatim",
        )

        result = geocode_location("Kochi", region_hint="Kerala, India")

        self.assertEqual(result.source, "nominatim")
        mock_remote_lookup.assert_called_once_with("Kochi", "Kerala, India")

    @patch("evplanner.services.geocoding._remote_lookup", return_value=None)
    @patch("evplanner.services.geocoding._local_lookup", return_value=None)
    def test_unknown_location_raises(self, mock_local_lookup, mock_remote_lookup):
        with self.assertRaises(LocationNotFoundError):
            geocode_location("Atlantis")

    def test_blank_location_raises(self):
        with self.assertRaises(GeocodingError):
            geocode_location("   ")

    @patch("evplanner.services.geocoding._remote_lookup")
    @patch("evplanner.services.geocoding._local_lookup")
    def test_results_are_cached(self, mock_local_lookup, mock_remote_lookup):
        mock_local_lookup.return_value = GeocodedPoint(
            latitude=10.52,
            longitude=76.21,
            display_name="Thrissur",
            source="pgeocode-local",
        )

        geocode_location("Thrissur")
        geocode_location("  thrissur ")

        mock_local_lookup.assert_called_once()

    @override_settings(
        GEOCODER_LOCAL_COUNTRY="",
        GEOCODER_COUNTRY_CODES="in",
        NOMINATIM_API_BASE_URL="https://nominatim.test",
    )
    @patch("evplanner.services.geocoding.requests.get")
    def test_remote_lookup_appends_region_and_country(self, mock_get):
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = [{"lat": "8.5241", "lon": "76.9366", "display_name": "Thiruvananthapuram"}]
        mock_get.return_value = response

        result = geocode_location("Thiruvananthapuram", region_hint="Kerala, India")

        self.assertEqual(result.source, "nominatim")
        self.assertAlmostEqual(result.latitude, 8.5241)
        params = mock_get.call_args.kwargs["params"]
        self.assertEqual(params["q"], "Thiruvananthapuram, Kerala, India")
        self.assertEqual(params["countrycodes"], "in")
        self.assertEqual(mock_get.call_args.args[0], "https://nominatim.test/search")


class CityLocatorTests(SimpleTestCase):
    def _locator(self, rows):
        with patch("evplanner.services.city_locator.pgeocode.Nominatim") as mock_nominatim:
            data = MagicMock()
            data.__getitem__.return_value.dropna.return_value.itertuples.return_value = rows
            mock_nominatim.return_value._data = data
            return CityLocator("in")

    def test_lookup_averages_postal_entries(self):
        locator = self._locator(
            [
                PostalRow("Kannur", "Kerala", 11.80, 75.30),
                PostalRow("Kannur", "Kerala", 11.90, 75.40),
            ]
        )

        result = locator.lookup("Kannur")

        self.assertAlmostEqual(result.latitude, 11.85)
        self.assertAlmostEqual(result.longitude, 75.35)

    def test_region_narrows_duplicate_place_names(self):
        locator = self._locator(
            [
                PostalRow("Palakkad", "Kerala", 10.77, 76.65),
                PostalRow("Palakkad", "Tamil Nadu", 11.00, 77.00),
            ]
        )

        result = locator.lookup("Palakkad", region="Kerala, India")

        self.assertEqual(result, Coordinate(latitude=10.77, longitude=76.65))

    def test_city_suffix_is_ignored(self):
        locator = self._locator([PostalRow("Kochi", "Kerala", 9.93, 76.26)])

        self.assertEqual(locator.lookup("Kochi City"), Coordinate(latitude=9.93, longitude=76.26))
        self.assertIsNone(locator.lookup("Madurai"))
