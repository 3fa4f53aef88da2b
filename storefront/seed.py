from decimal import Decimal

# Inserted in this order, one row per statement, when the products table is empty
SAMPLE_PRODUCTS = [
    {
        "name": "Wireless Bluetooth Headphones",
        "description": "High-quality wireless headphones with noise cancellation",
        "price": Decimal("199.99"),
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=300",
        "category": "Electronics",
        "stock_quantity": 50,
    },
    {
        "name": "Smart Fitness Watch",
        "description": "Track your fitness goals with this advanced smartwatch",
        "price": Decimal("299.99"),
        "image_url": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=300",
        "category": "Electronics",
        "stock_quantity": 30,
    },
    {
        "name": "Organic Coffee Beans",
        "description": "Premium organic coffee beans from Colombia",
        "price": Decimal("24.99"),
        "image_url": "https://images.unsplash.com/photo-1559056199-641a0ac8b55e?w=300",
        "category": "Food & Beverage",
        "stock_quantity": 100,
    },
    {
        "name": "Yoga Mat Premium",
        "description": "Non-slip yoga mat perfect for all types of yoga practice",
        "price": Decimal("79.99"),
        "image_url": "https://images.unsplash.com/photo-1544367567-0f2fcb009e0b?w=300",
        "category": "Sports",
        "stock_quantity": 75,
    },
    {
        "name": "Minimalist Backpack",
        "description": "Sleek and functional backpack for everyday use",
        "price": Decimal("89.99"),
        "image_url": "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=300",
        "category": "Accessories",
        "stock_quantity": 40,
    },
]
