from django.urls import path

from evplanner.api.views import RoutePlanView, StationDetailView, StationListView

urlpatterns = [
    path("route-plan/", RoutePlanView.as_view(), name="route-plan"),
    path("stations/", StationListView.as_view(), name="station-list"),
    path("stations/<str:station_id>/", StationDetailView.as_view(), name="station-detail"),
]
