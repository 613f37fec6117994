from django.contrib import admin

from modules.orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Read-only: line items change only through the API so stock stays in step."""

    model = OrderItem
    extra = 0
    can_delete = False
    fields = ["product", "quantity", "price", "created_at"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["order_number", "status", "created_at", "updated_at"]
    list_filter = ["status"]
    search_fields = ["order_number"]
    readonly_fields = ["id", "order_number", "created_at", "updated_at"]
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False
