"""Example usage of the stack parser and telemetry client."""

from app_insights import ApplicationInsights
from config import AppInsightsOptions
from stack_parser import parse
from utils.logging import configure_logging

# Example Chrome error
CHROME_ERROR = {
    "name": "TypeError",
    "message": "Cannot read properties of undefined (reading 'email')",
    "stack": """TypeError: Cannot read properties of undefined (reading 'email')
    at validateUser (https://shop.example.com/static/js/checkout.js:120:17)
    at submitOrder (https://shop.example.com/static/js/checkout.js:88:5)
    at HTMLButtonElement.<anonymous> (https://shop.example.com/static/js/main.js:14:9)"""
}

# Example Firefox error
FIREFOX_ERROR = {
    "name": "TypeError",
    "message": "user is undefined",
    "stack": """validateUser@https://shop.example.com/static/js/checkout.js:120:17
submitOrder@https://shop.example.com/static/js/checkout.js:88:5
@https://shop.example.com/static/js/main.js:14:9"""
}


def main():
    configure_logging("INFO")

    for error in (CHROME_ERROR, FIREFOX_ERROR):
        print(f"\n{error['message']}")
        for frame in parse(error):
            print(f"  #{frame.frame_index} {frame.function_name} "
                  f"{frame.file_name}:{frame.line_number}:{frame.column_number}")

    # Developer mode logs envelopes instead of posting them
    client = ApplicationInsights(AppInsightsOptions(
        instrumentation_key="00000000-0000-0000-0000-000000000000",
        application_name="shop",
        developer_mode=True
    ))
    client.set_common_properties({"release": "2024.06.1"})
    client.track_page_view("shop/checkout", "https://shop.example.com/checkout")
    client.track_exception(CHROME_ERROR)


if __name__ == "__main__":
    main()
