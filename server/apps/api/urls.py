"""
URL routing for the JSON API.

- /api/register/                   [POST]
- /api/authenticate/               [POST]
- /api/users/{principal_id}/           [GET]
- /api/users/{principal_id}/uploads/   [GET]
"""

from django.urls import path

from server.apps.api import views

app_name = 'api'

urlpatterns = [
    path('register/', views.register_view, name='register'),
    path('authenticate/', views.authenticate_view, name='authenticate'),
    path('users/<uuid:principal_id>/', views.user_view, name='user'),
    path(
        'users/<uuid:principal_id>/uploads/',
        views.uploads_view,
        name='uploads',
    ),
]
