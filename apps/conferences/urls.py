from django.urls import path

from .views import CallForPapersViewSet

app_name = "conferences"

call_for_papers = CallForPapersViewSet.as_view(
    {
        "get": "retrieve",
        "post": "create",
        "put": "update",
        "patch": "partial_update",
    }
)
call_for_papers_versions = CallForPapersViewSet.as_view({"get": "versions"})

urlpatterns = [
    path("call_for_papers/", call_for_papers, name="call-for-papers"),
    path(
        "call_for_papers/versions/",
        call_for_papers_versions,
        name="call-for-papers-versions",
    ),
]
