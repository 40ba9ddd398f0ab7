# Display names double as product keys; the store exposes no numeric ids.
class PRODUCTS:
    BLUE_TSHIRT = "Blue T-Shirt"
    BLACK_STRIPES = "Black T-shirt with white stripes"
