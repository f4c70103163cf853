from django.urls import path
from . import views

app_name = "dashboard"

urlpatterns = [
    path("", views.index, name="index"),
    path("refresh/", views.refresh, name="refresh"),
    path("block-date/", views.block_date, name="block-date"),
    path("bookings/<str:booking_id>/delete/", views.delete_booking, name="delete-booking"),
]
