from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # Dashboard
    path('', views.dashboard_view, name='dashboard'),

    # Point of sale
    path('sales/', views.pos_view, name='pos'),
    path('sales/cart/add/<str:product_id>/', views.cart_add, name='cart_add'),
    path('sales/cart/update/<str:product_id>/', views.cart_update, name='cart_update'),
    path('sales/cart/remove/<str:product_id>/', views.cart_remove, name='cart_remove'),
    path('sales/cart/customer/', views.cart_customer, name='cart_customer'),
    path('sales/checkout/', views.checkout, name='checkout'),

    # Stock
    path('stock/', views.product_list, name='product_list'),
    path('stock/new/', views.create_product, name='create_product'),
    path('stock/<str:product_id>/edit/', views.edit_product, name='edit_product'),
    path('stock/<str:product_id>/restock/', views.restock_product, name='restock_product'),
    path('stock/<str:product_id>/delete/', views.delete_product, name='delete_product'),

    # Customers
    path('customers/', views.customer_list, name='customer_list'),
    path('customers/new/', views.create_customer, name='create_customer'),
    path('customers/<str:customer_id>/', views.customer_detail, name='customer_detail'),
    path('customers/<str:customer_id>/edit/', views.edit_customer, name='edit_customer'),
    path('customers/<str:customer_id>/payment/', views.receive_customer_payment, name='customer_payment'),
    path('customers/<str:customer_id>/delete/', views.delete_customer, name='delete_customer'),

    # Suppliers
    path('suppliers/', views.supplier_list, name='supplier_list'),
    path('suppliers/new/', views.create_supplier, name='create_supplier'),
    path('suppliers/<str:supplier_id>/', views.supplier_detail, name='supplier_detail'),
    path('suppliers/<str:supplier_id>/edit/', views.edit_supplier, name='edit_supplier'),
    path('suppliers/<str:supplier_id>/payment/', views.make_supplier_payment, name='supplier_payment'),
    path('suppliers/<str:supplier_id>/delete/', views.delete_supplier, name='delete_supplier'),

    # Reports
    path('reports/', views.report_list, name='report_list'),
    path('reports/<str:sale_id>/', views.sale_detail, name='sale_detail'),
]
