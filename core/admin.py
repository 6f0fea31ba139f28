from django.contrib import admin

from .models import Customer, Product, Sale, SaleItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ('name', 'contact_person', 'phone', 'balance', 'product_count', 'created_at')
    search_fields = ('name', 'contact_person', 'phone')
    ordering = ('-created_at',)
    readonly_fields = ('id', 'balance', 'created_at')
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'contact_person', 'phone')
        }),
        ('Payable', {
            'fields': ('balance',),
            'description': 'Changed only by credit purchases and payments in the shop screens.'
        }),
        ('System Info', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Products'


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'supplier', 'stock', 'purchase_price', 'selling_price', 'profit_margin', 'is_low_stock')
    list_filter = ('category', 'supplier')
    search_fields = ('name', 'category', 'supplier__name')
    ordering = ('name',)
    readonly_fields = ('id', 'stock', 'created_at', 'profit_margin', 'is_low_stock')

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'category', 'supplier')
        }),
        ('Pricing', {
            'fields': ('purchase_price', 'selling_price', 'profit_margin')
        }),
        ('Inventory', {
            'fields': ('stock', 'is_low_stock'),
            'description': 'Stock changes only through restock and checkout.'
        }),
        ('System Info', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('supplier')


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'address', 'balance', 'created_at')
    search_fields = ('name', 'phone')
    ordering = ('-created_at',)
    readonly_fields = ('id', 'balance', 'created_at')
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'phone', 'address')
        }),
        ('Udhaar', {
            'fields': ('balance',),
            'description': 'Changed only by udhaar sales and payments in the shop screens.'
        }),
        ('System Info', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    fields = ('position', 'product_name', 'quantity', 'purchase_price', 'selling_price', 'line_total')
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Sales are an immutable record; the admin only displays them"""
    list_display = ('id', 'customer_display', 'total_amount', 'total_cost', 'profit', 'payment_status', 'date')
    list_filter = ('payment_status', 'date')
    search_fields = ('id', 'items__product_name')
    ordering = ('-date',)
    readonly_fields = ('id', 'customer_display', 'total_amount', 'total_cost', 'profit', 'payment_status', 'date')
    fields = readonly_fields
    inlines = [SaleItemInline]

    def customer_display(self, obj):
        # The customer row may be gone; the join then leaves it empty.
        return obj.customer.name if obj.customer else 'Walk-in'
    customer_display.short_description = 'Customer'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('customer')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
