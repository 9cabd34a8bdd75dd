"""
URL configuration for user, role, menu and activity log endpoints.
"""

from django.urls import path

from api.v1.accounts import views

urlpatterns = [
    path("users/", views.UserListView.as_view(), name="user-list"),
    path("users/<uuid:pk>/", views.UserDetailView.as_view(), name="user-detail"),
    path("users/<uuid:user_id>/rights/", views.UserRightsView.as_view(), name="user-rights"),
    path("roles/", views.RoleListView.as_view(), name="role-list"),
    path("roles/<uuid:pk>/", views.RoleDetailView.as_view(), name="role-detail"),
    path("menus/", views.MenuListView.as_view(), name="menu-list"),
    path("menus/<uuid:pk>/", views.MenuDetailView.as_view(), name="menu-detail"),
    path(
        "role-permissions/",
        views.RolePermissionListView.as_view(),
        name="role-permission-list",
    ),
    path(
        "role-permissions/bulk/",
        views.RolePermissionBulkView.as_view(),
        name="role-permission-bulk",
    ),
    path(
        "role-permissions/role/<uuid:role_id>/",
        views.RolePermissionListView.as_view(),
        name="role-permission-by-role",
    ),
    path(
        "role-permissions/<uuid:pk>/",
        views.RolePermissionDetailView.as_view(),
        name="role-permission-detail",
    ),
    path("activity-logs/", views.ActivityLogListView.as_view(), name="activity-log-list"),
    path(
        "activity-logs/clear/",
        views.ActivityLogClearView.as_view(),
        name="activity-log-clear",
    ),
    path(
        "activity-logs/<uuid:pk>/",
        views.ActivityLogDetailView.as_view(),
        name="activity-log-detail",
    ),
]
