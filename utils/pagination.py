# ==================== UTILS/PAGINATION.PY ====================
from rest_framework.response import Response


class PaginatedResponseMixin:
    """List output as {success, count, next, previous, data}, single objects as {success, data}"""

    def paginated_response(self, queryset, serializer_class=None, **extra):
        serializer_class = serializer_class or self.get_serializer_class()
        context = self.get_serializer_context()
        page = self.paginate_queryset(queryset)
        if page is not None:
            response = self.get_paginated_response(serializer_class(page, many=True, context=context).data)
            response.data['success'] = True
            response.data['data'] = response.data.pop('results')
            response.data.update(extra)
            return response

        data = serializer_class(queryset, many=True, context=context).data
        return Response({'success': True, 'count': len(data), 'data': data, **extra})

    def list(self, request, *args, **kwargs):
        return self.paginated_response(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data})
