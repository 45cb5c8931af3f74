from django.urls import path
from . import views

app_name = 'checkout'

urlpatterns = [
    # Basket (session backed)
    # GET    /api/checkout/basket/                 - Basket with fee summary
    # PATCH  /api/checkout/basket/                 - Save cover-fees choice
    # DELETE /api/checkout/basket/                 - Clear basket
    # POST   /api/checkout/basket/items/           - Add item
    # DELETE /api/checkout/basket/items/{id}/      - Remove item
    path('basket/', views.basket, name='basket'),
    path('basket/items/', views.basket_items, name='basket-items'),
    path('basket/items/<str:item_id>/', views.basket_item_detail, name='basket-item-detail'),

    # POST   /api/checkout/fees/                   - Fee split for subtotals
    path('fees/', views.fees, name='fees'),

    # Checkout and payment
    # POST   /api/checkout/                        - Create order, start payment
    # POST   /api/checkout/express/                - Express (wallet) checkout
    # POST   /api/checkout/confirm/                - Confirm payment
    # GET    /api/checkout/orders/{order_number}/  - Order status
    # POST   /api/checkout/webhook/                - Stripe webhook
    path('', views.checkout, name='checkout'),
    path('express/', views.express_checkout, name='express'),
    path('confirm/', views.confirm, name='confirm'),
    path('orders/<str:order_number>/', views.order_status, name='order-status'),
    path('webhook/', views.stripe_webhook, name='webhook'),
]
