from typing import Optional

from django.core.paginator import InvalidPage
from django.db.models import QuerySet
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.utils.urls import replace_query_param


class CustomPageNumberPagination(PageNumberPagination):
    """
    Page number pagination with:
    - Configurable page size
    - Detailed pagination metadata
    - Out-of-range page numbers clamped instead of raising 404
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
    page_query_param = "page"

    def paginate_queryset(
        self, queryset: QuerySet, request, view=None
    ) -> Optional[list]:
        """
        Paginate a queryset and return a page of results.
        """
        self.request = request
        page_size = self.get_page_size(request)
        if not page_size:
            return None

        paginator = self.django_paginator_class(queryset, page_size)
        page_number = self.get_page_number(request, paginator)

        try:
            self.page = paginator.page(page_number)
        except InvalidPage:
            self.page = paginator.page(1)

        if paginator.num_pages > 1 and self.template is not None:
            # The browsable API should display pagination controls.
            self.display_page_controls = True

        return list(self.page)

    def get_paginated_response(self, data: list, **extra) -> Response:
        """
        Return a paginated style Response object for the given output data.

        Keyword arguments are added to the payload next to the results.
        """
        payload = {
            "pagination": {
                "count": self.page.paginator.count,
                "total_pages": self.page.paginator.num_pages,
                "current_page": self.page.number,
                "page_size": self.page.paginator.per_page,
                "has_next": self.page.has_next(),
                "has_previous": self.page.has_previous(),
            },
            "links": {
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
                "first": self.get_first_link(),
                "last": self.get_last_link(),
            },
        }
        payload.update(extra)
        payload["results"] = data
        return Response(payload)

    def get_first_link(self) -> Optional[str]:
        """Get the first page link"""
        if not self.page.has_previous():
            return None

        url = self.request.build_absolute_uri()
        return replace_query_param(url, self.page_query_param, 1)

    def get_last_link(self) -> Optional[str]:
        """Get the last page link"""
        if not self.page.has_next():
            return None

        url = self.request.build_absolute_uri()
        return replace_query_param(
            url, self.page_query_param, self.page.paginator.num_pages
        )

    def get_page_size(self, request) -> int:
        """
        Get the page size for the request with validation
        """
        if self.page_size_query_param:
            try:
                page_size = int(request.query_params[self.page_size_query_param])
                if page_size > 0:
                    return min(page_size, self.max_page_size)
            except (KeyError, ValueError):
                pass

        return self.page_size

    def get_page_number(self, request, paginator) -> int:
        """
        Get the page number for the request with validation
        """
        page_number = request.query_params.get(self.page_query_param, 1)
        if page_number in self.last_page_strings:
            page_number = paginator.num_pages

        try:
            page_number = int(page_number)
            if page_number < 1:
                page_number = 1
            elif page_number > paginator.num_pages and paginator.num_pages > 0:
                page_number = paginator.num_pages
        except ValueError:
            page_number = 1

        return page_number
