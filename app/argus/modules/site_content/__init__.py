"""
Homepage content: company logo marquee and testimonials.
"""
