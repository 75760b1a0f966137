from django.urls import path
from . import views

urlpatterns = [
    path('', views.home, name='home'),
    path('api/newspapers/', views.newspaper_list, name='newspaper_list'),
    path('api/newspapers/<int:newspaper_id>/', views.newspaper_detail, name='newspaper_detail'),
    path('api/newspapers/<int:newspaper_id>/view/', views.increment_view_count, name='increment_view_count'),
    path('api/newspapers/<int:newspaper_id>/hit/', views.hotspot_at, name='hotspot_at'),
    path('newspapers/<int:newspaper_id>/', views.viewer, name='viewer'),
    path('newspapers/<int:newspaper_id>/pages/<int:page_number>.png', views.page_image, name='page_image'),
    path('newspapers/<int:newspaper_id>/areas/<int:area_id>/', views.area_detail, name='area_detail'),
    path('newspapers/<int:newspaper_id>/areas/<int:area_id>/image/', views.area_image, name='area_image'),
    path('manage/', views.dashboard, name='dashboard'),
    path('manage/upload/', views.upload_newspaper, name='upload_newspaper'),
    path('manage/<int:newspaper_id>/publish/', views.toggle_publish, name='toggle_publish'),
    path('manage/<int:newspaper_id>/delete/', views.delete_newspaper, name='delete_newspaper'),
    path('manage/<int:newspaper_id>/map-area/', views.add_mapped_area, name='add_mapped_area'),
    path('manage/<int:newspaper_id>/map/', views.mapper, name='mapper'),
    path('manage/<int:newspaper_id>/map/pointer/', views.mapper_pointer, name='mapper_pointer'),
    path('manage/<int:newspaper_id>/map/save/', views.mapper_save, name='mapper_save'),
    path('manage/<int:newspaper_id>/map/cancel/', views.mapper_cancel, name='mapper_cancel'),
    path('manage/<int:newspaper_id>/map/page/', views.mapper_page, name='mapper_page'),
    path('manage/<int:newspaper_id>/map/zoom/', views.mapper_zoom, name='mapper_zoom'),
]
