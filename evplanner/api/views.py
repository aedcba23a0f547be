from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from requests import HTTPError, RequestException
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from evplanner.api.serializers import RoutePlanRequestSerializer
from evplanner.domain.errors import PlanningError
from evplanner.services.geocoding import GeocodingError
from evplanner.services.route_planner import build_route_plan, serialize_station
from evplanner.services.routing import NoRouteFoundError, ProviderUnavailableError
from evplanner.services.station_directory import get_station, list_stations


class RoutePlanView(APIView):
    @extend_schema(
        request=RoutePlanRequestSerializer,
        responses={
            200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Route plan with charging stops."),
            400: OpenApiResponse(description="Validation, geocoding or routing error."),
            422: OpenApiResponse(response=OpenApiTypes.OBJECT, description="No feasible plan: vehicle stranded."),
            502: OpenApiResponse(description="Upstream API/network error."),
        },
    )
    def post(self, request):
        serializer = RoutePlanRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data
        try:
            result = build_route_plan(
                start_location=payload["start_location"],
                destination_location=payload["destination_location"],
                battery_percent=payload["battery_percent"],
                full_range_km=payload["full_range_km"],
                battery_capacity_kwh=payload["battery_capacity_kwh"],
                strategy=payload["strategy"],
                region_hint=payload["region_hint"],
                lateral_search_start_km=payload["lateral_search_start_km"],
                lateral_search_step_km=payload["lateral_search_step_km"],
                lateral_search_max_km=payload["lateral_search_max_km"],
                max_full_charge_time_hours=payload["max_full_charge_time_hours"],
                min_battery_threshold_percent=payload["min_battery_threshold_percent"],
            )
        except (GeocodingError, NoRouteFoundError, PlanningError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except ProviderUnavailableError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        except HTTPError as exc:
            return Response(
                {"detail": f"External API error: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        except RequestException as exc:
            return Response(
                {"detail": f"Network error while calling external service: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        if result["status"] == "stranded":
            return Response(result, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        return Response(result, status=status.HTTP_200_OK)


class StationListView(APIView):
    @extend_schema(
        responses={200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Station directory snapshot.")},
    )
    def get(self, request):
        stations = [serialize_station(station) for station in list_stations()]
        return Response({"count": len(stations), "data": stations}, status=status.HTTP_200_OK)


class StationDetailView(APIView):
    @extend_schema(
        responses={
            200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="A single station."),
            404: OpenApiResponse(description="Station not found."),
        },
    )
    def get(self, request, station_id: str):
        station = get_station(station_id)
        if station is None:
            return Response({"detail": "Station not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(serialize_station(station), status=status.HTTP_200_OK)
