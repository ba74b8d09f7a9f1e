from typing import Any, Dict

import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["name", "min_price", "max_price"]

    def to_lookups(self) -> Dict[str, Any]:
        """ORM look-ups for the supplied, validated parameters.

        Call only after ``is_valid()``.
        """
        lookups: Dict[str, Any] = {}
        for name, value in self.form.cleaned_data.items():
            if value in (None, ""):
                continue
            declared = self.filters[name]
            lookups[f"{declared.field_name}__{declared.lookup_expr}"] = value
        return lookups
