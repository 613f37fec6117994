from django.contrib import admin

from modules.products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price", "stock_quantity", "updated_at"]
    search_fields = ["name", "description"]
    ordering = ["name"]
    # Stock only moves through order reconciliation.
    readonly_fields = ["id", "stock_quantity", "created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        # Writing back the whole row would overwrite concurrent stock updates.
        if change:
            obj.save(update_fields=list(form.fields))
        else:
            obj.save()
