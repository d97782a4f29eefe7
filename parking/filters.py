# ============================= PARKING/FILTERS.PY =============================
import django_filters
from .models import ParkingSpot


class ParkingSpotFilter(django_filters.FilterSet):
    """Filtering for the public spot search"""

    price_min = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='gte',
        label='Minimum Price Per Hour'
    )
    price_max = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='lte',
        label='Maximum Price Per Hour'
    )
    has_free_slots = django_filters.BooleanFilter(
        method='filter_has_free_slots',
        label='Has Free Slots'
    )

    class Meta:
        model = ParkingSpot
        fields = {
            'city': ['exact', 'icontains'],
            'is_maintenance_mode': ['exact'],
            'created_at': ['gte', 'lte'],
        }

    def filter_has_free_slots(self, queryset, name, value):
        if value:
            return queryset.filter(available_slots__gt=0)
        return queryset.filter(available_slots=0)
